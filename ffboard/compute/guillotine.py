"""Elimination ("guillotine") format: everyone against the field.

There are no pairs; each week every roster is ranked by score and the bottom
of the table is at risk of being chopped.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

from ffboard.constants import (
    FIELD_PLACEHOLDER_BASE,
    SAFETY_PCT_MAX,
    SAFETY_PCT_MIN,
    SAFETY_PCT_UNKNOWN,
)

from .core import owner_of
from .matchups import build_team_view, resolve_inputs
from .models import GuillotineRow, ProcessedMatchup, TeamView

ZONE_SUPER_SAFE = "super_safe"
ZONE_SAFE = "safe"
ZONE_DANGER = "danger"
ZONE_CHOPPED = "chopped"
ZONES = (ZONE_SUPER_SAFE, ZONE_SAFE, ZONE_DANGER, ZONE_CHOPPED)


def zone_cutoffs(size: int) -> tuple[int, int, int]:
    """Last rank of the super-safe, safe and danger bands (league-size quartiles).

    For 12 teams: 3, 6, 9, so ranks 10-12 are in the chopped band. The last
    place is always chopped once there are at least two teams.
    """
    if size <= 0:
        return (0, 0, 0)
    c1 = math.ceil(size * 0.25)
    c2 = math.ceil(size * 0.5)
    c3 = math.ceil(size * 0.75)
    if size >= 2:
        c3 = min(c3, size - 1)
        c2 = min(c2, c3)
        c1 = min(c1, c2)
    return (c1, c2, c3)


def zone_for(rank: int, size: int) -> str:
    c1, c2, c3 = zone_cutoffs(size)
    if rank <= c1:
        return ZONE_SUPER_SAFE
    if rank <= c2:
        return ZONE_SAFE
    if rank <= c3:
        return ZONE_DANGER
    return ZONE_CHOPPED


def _sort_score(team: TeamView) -> float:
    if team.points is not None:
        return team.points
    return team.projection if team.projection > 0 else -1.0


def safety_pct(points: float | None, max_points: float) -> float:
    """Score relative to the week's best, bounded for display. Not a probability."""
    if points is None or max_points <= 0:
        return SAFETY_PCT_UNKNOWN
    return round(min(SAFETY_PCT_MAX, max(SAFETY_PCT_MIN, points / max_points * 100.0)), 1)


def derive_guillotine(
    matchups: Any,
    users: Any,
    rosters: Any,
    week: int,
    history: Mapping[int, Sequence[float]] | None = None,
) -> list[GuillotineRow]:
    """Rank every roster by points, then projection, then roster id."""
    resolved = resolve_inputs(matchups, users, rosters, "guillotine")
    if resolved is None:
        return []
    entries, users_by_id, rosters_by_id = resolved
    history = history or {}

    teams = [
        build_team_view(
            e,
            rosters_by_id.get(e.roster_id),
            owner_of(rosters_by_id.get(e.roster_id), users_by_id),
            week,
            history.get(e.roster_id),
        )
        for e in entries
    ]
    teams.sort(key=lambda t: (-_sort_score(t), t.roster_id))

    scored = [t.points for t in teams if t.points is not None]
    max_points = max(scored) if scored else 0.0
    size = len(teams)

    rows = []
    for idx, team in enumerate(teams):
        rank = idx + 1
        rows.append(
            GuillotineRow(
                rank=rank,
                zone=ZONE_SAFE if team.is_pre_game else zone_for(rank, size),
                safety_pct=safety_pct(team.points, max_points),
                team=team,
            )
        )
    return rows


def field_rank_matchups(rows: Sequence[GuillotineRow]) -> list[ProcessedMatchup]:
    """Express ranked rows as team-vs-"Rank #n" placeholders for pairwise displays."""
    out = []
    for idx, row in enumerate(rows):
        placeholder = TeamView(
            roster_id=FIELD_PLACEHOLDER_BASE + idx,
            team_name=f"Rank #{row.rank}",
            owner_name=f"Position {row.rank}",
            handle="rank",
            avatar=None,
            seed="",
            points=0.0,
            projection=0.0,
            win_probability=None,
            is_pre_game=False,
        )
        out.append(ProcessedMatchup(matchup_id=row.team.roster_id, teams=(row.team, placeholder)))
    return out


def rows_by_zone(rows: Sequence[GuillotineRow]) -> dict[str, list[GuillotineRow]]:
    """Rows grouped by zone, worst zone first and worst rank first inside each."""
    grouped: dict[str, list[GuillotineRow]] = {}
    for zone in reversed(ZONES):
        members = sorted((r for r in rows if r.zone == zone), key=lambda r: -r.rank)
        if members:
            grouped[zone] = members
    return grouped
