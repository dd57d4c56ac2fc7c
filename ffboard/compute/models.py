"""View models produced by the derivers."""

from __future__ import annotations

import datetime
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(slots=True)
class TeamView:
    roster_id: int
    team_name: str
    owner_name: str
    handle: str
    avatar: str | None
    seed: str
    points: float | None
    projection: float
    win_probability: float | None = None
    is_pre_game: bool = True


@dataclass(slots=True)
class ProcessedMatchup:
    matchup_id: int
    teams: tuple[TeamView, TeamView]


@dataclass(slots=True)
class StandingsRow:
    roster_id: int
    team_name: str
    owner_name: str
    wins: int
    losses: int
    ties: int
    points_for: float
    points_against: float

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def win_pct(self) -> float:
        g = self.games
        return round((self.wins + 0.5 * self.ties) / g, 4) if g else 0.0

    @property
    def point_diff(self) -> float:
        return round(self.points_for - self.points_against, 2)


@dataclass(slots=True)
class GuillotineRow:
    rank: int
    zone: str
    safety_pct: float
    team: TeamView


@dataclass(slots=True)
class Manager:
    user_id: str
    username: str | None
    display_name: str
    avatar: str | None
    team_name: str | None


@dataclass(slots=True)
class DraftSlot:
    pick: int
    user_id: str
    display_name: str
    team_name: str | None
    avatar: str | None


@dataclass(slots=True)
class DraftView:
    draft_id: str
    type: str
    status: str
    season: str | None
    teams: int | None
    rounds: int | None
    start_time: datetime.datetime | None
    created: datetime.datetime | None
    last_picked: datetime.datetime | None
    draft_order: list[DraftSlot] = field(default_factory=list)


@dataclass(slots=True)
class DraftPickView:
    round: int
    pick_no: int
    roster_id: int | None
    player_id: str | None
    player_name: str
    position: str | None
    nfl_team: str | None
    manager: str


def to_dict(obj: Any) -> Any:
    """JSON-friendly dict for any view model (datetimes become ISO strings)."""
    data = asdict(obj)
    return _jsonable(data)


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    return value
