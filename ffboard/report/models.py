from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any

from ffboard.compute.models import (
    DraftPickView,
    DraftView,
    GuillotineRow,
    ProcessedMatchup,
    StandingsRow,
    to_dict,
)

SCHEMA_VERSION = "1.0.0"


@dataclass(slots=True)
class Provenance:
    digest: str
    fetched_at: datetime.datetime
    source: str = "sleeper"
    endpoint: str = ""

    @property
    def short_hash(self) -> str:
        return self.digest[:8]


@dataclass(slots=True)
class LeagueView:
    league_key: str
    league_id: str
    league_name: str
    league_type: str
    format: str
    week: int
    matchups: list[ProcessedMatchup]
    standings: list[StandingsRow]
    guillotine: list[GuillotineRow] = field(default_factory=list)
    provenance: Provenance | None = None
    site_title: str = ""
    season: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.matchups and not self.guillotine

    @property
    def source_path(self) -> str:
        return f"/league/{self.league_id}/matchups/{self.week}"

    def to_json_payload(self) -> dict[str, Any]:
        base: dict[str, Any] = {
            "schema_version": SCHEMA_VERSION,
            "league": {
                "key": self.league_key,
                "league_id": self.league_id,
                "name": self.league_name,
                "type": self.league_type,
                "format": self.format,
            },
            "week": self.week,
            "site": {"title": self.site_title, "season": self.season},
            "matchups": [to_dict(m) for m in self.matchups],
            "standings": [
                {**to_dict(r), "games": r.games, "win_pct": r.win_pct, "point_diff": r.point_diff}
                for r in self.standings
            ],
        }
        if self.guillotine:
            base["guillotine"] = [to_dict(r) for r in self.guillotine]
        if self.provenance is not None:
            base["provenance"] = {
                "source": self.provenance.source,
                "hash": self.provenance.digest,
                "fetched_at": self.provenance.fetched_at.isoformat(),
                "endpoint": self.provenance.endpoint,
            }
        return base


@dataclass(slots=True)
class DraftsReport:
    league_id: str
    drafts: list[DraftView]
    boards: dict[str, list[DraftPickView]] = field(default_factory=dict)


@dataclass(slots=True)
class DisplayState:
    """What the TV screen should show for one rotation slot."""

    league_key: str
    league_name: str
    view: LeagueView | None = None
    error: str | None = None
    retry_count: int = 0
    max_retries: int = 0

    @property
    def ok(self) -> bool:
        return self.view is not None and self.error is None
