"""Pydantic schemas for Sleeper API payloads.

Validation happens once, at the client edge. Everything downstream receives
typed records; payloads that do not fit raise ``MalformedDataError``.
Unknown keys are ignored, since the upstream adds fields without notice.
"""

from __future__ import annotations

from typing import Any, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MalformedDataError

T = TypeVar("T", bound=BaseModel)


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class LeagueSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    num_teams: int | None = None
    start_week: int | None = None
    playoff_week_start: int | None = None


class League(_Record):
    league_id: str
    name: str = ""
    season: str = ""
    status: str = ""
    sport: str = "nfl"
    total_rosters: int | None = None
    previous_league_id: str | None = None
    settings: LeagueSettings = Field(default_factory=LeagueSettings)
    scoring_settings: dict[str, float] = Field(default_factory=dict)
    roster_positions: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None


class UserMetadata(_Record):
    team_name: str | None = None


class User(_Record):
    user_id: str
    username: str | None = None
    display_name: str | None = None
    avatar: str | None = None
    metadata: UserMetadata | None = None

    @property
    def team_name(self) -> str | None:
        return self.metadata.team_name if self.metadata else None


class RosterSettings(_Record):
    wins: int | None = None
    losses: int | None = None
    ties: int | None = None
    fpts: float | None = None
    fpts_decimal: float | None = None
    fpts_against: float | None = None
    fpts_against_decimal: float | None = None
    rank: int | None = None


class Roster(_Record):
    roster_id: int
    owner_id: str | None = None
    co_owners: list[str] | None = None
    starters: list[str | None] | None = None
    players: list[str | None] | None = None
    settings: RosterSettings | None = None


class MatchupEntry(_Record):
    roster_id: int
    matchup_id: int | None = None
    points: float | None = None
    starters: list[str | None] | None = None
    players: list[str | None] | None = None
    players_points: dict[str, float] | None = None
    custom_points: float | None = None


class Transaction(_Record):
    transaction_id: str
    type: str
    status: str = ""
    created: int | None = None
    leg: int | None = None
    roster_ids: list[int] = Field(default_factory=list)
    adds: dict[str, int] | None = None
    drops: dict[str, int] | None = None
    settings: dict[str, Any] | None = None


class DraftSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    teams: int | None = None
    rounds: int | None = None


class Draft(_Record):
    draft_id: str
    type: str = "snake"
    status: str = ""
    season: str | None = None
    start_time: int | None = None
    created: int | None = None
    last_picked: int | None = None
    draft_order: dict[str, int] | None = None
    settings: DraftSettings = Field(default_factory=DraftSettings)


class Pick(_Record):
    round: int
    pick_no: int
    draft_slot: int | None = None
    roster_id: int | None = None
    player_id: str | None = None
    picked_by: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


def parse_one(model: type[T], payload: Any, endpoint: str) -> T:
    if not isinstance(payload, dict):
        raise MalformedDataError(endpoint, f"expected object, got {type(payload).__name__}")
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise MalformedDataError(endpoint, str(e)) from e


def parse_list(model: type[T], payload: Any, endpoint: str) -> list[T]:
    if not isinstance(payload, list):
        raise MalformedDataError(endpoint, f"expected array, got {type(payload).__name__}")
    try:
        return [model.model_validate(item) for item in payload]
    except ValidationError as e:
        raise MalformedDataError(endpoint, str(e)) from e


def coerce_records(model: type[T], items: Any) -> list[T] | None:
    """Accept validated records or raw dicts; ``None`` when the payload is unusable.

    Used by the derivers so that callers can hand them either typed records or
    the raw JSON they got from elsewhere.
    """
    if not isinstance(items, Sequence) or isinstance(items, (str, bytes)):
        return None
    out: list[T] = []
    for item in items:
        if isinstance(item, model):
            out.append(item)
            continue
        if not isinstance(item, dict):
            return None
        try:
            out.append(model.model_validate(item))
        except ValidationError:
            return None
    return out
