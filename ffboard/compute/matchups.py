"""Head-to-head matchup derivation."""

from __future__ import annotations

import logging
import statistics
from typing import Any, Mapping, Sequence

from ffboard.api.errors import MalformedDataError
from ffboard.api.schemas import MatchupEntry, Roster, User, coerce_records
from ffboard.constants import MIN_HISTORY_WEEKS, NEUTRAL_PROJECTION, TRAILING_WEEKS

from .core import (
    avatar_url,
    effective_points,
    games_played,
    group_rows,
    handle_for,
    index_users,
    owner_of,
    points_for,
    seed_label,
)
from .models import ProcessedMatchup, TeamView
from .probability import DEFAULT_MODEL, ProbabilityModel, win_probability

logger = logging.getLogger(__name__)


def project_points(
    roster: Roster | None,
    week: int,
    history: Sequence[float] | None = None,
    default: float = NEUTRAL_PROJECTION,
) -> float:
    """Expected score for ``roster`` in ``week``.

    Week 1 has no history and projects 0. Otherwise: mean of the trailing
    weeks when at least two are known, then the season average, then
    ``default``.
    """
    if week <= 1:
        return 0.0
    recent = [float(x) for x in (history or []) if x is not None]
    if len(recent) >= MIN_HISTORY_WEEKS:
        return round(statistics.fmean(recent[-TRAILING_WEEKS:]), 2)
    games = games_played(roster)
    if games > 0:
        total = points_for(roster)
        if total > 0:
            return round(total / games, 2)
    return default


def build_team_view(
    entry: MatchupEntry,
    roster: Roster | None,
    user: User | None,
    week: int,
    history: Sequence[float] | None = None,
) -> TeamView:
    points = effective_points(entry)
    return TeamView(
        roster_id=entry.roster_id,
        team_name=(user and (user.team_name or user.display_name)) or f"Team {entry.roster_id}",
        owner_name=(user and user.display_name) or "Unknown",
        handle=handle_for(user),
        avatar=avatar_url(user.avatar if user else None),
        seed=seed_label(roster),
        points=points,
        projection=project_points(roster, week, history),
        win_probability=None,
        is_pre_game=points is None,
    )


def resolve_inputs(matchups: Any, users: Any, rosters: Any, what: str):
    """Coerce the three payloads, or ``None`` if any is malformed."""
    entries = coerce_records(MatchupEntry, matchups)
    user_list = coerce_records(User, users)
    roster_list = coerce_records(Roster, rosters)
    if entries is None or user_list is None or roster_list is None:
        logger.warning("%s: malformed payload, returning no rows", what)
        return None
    rosters_by_id = {r.roster_id: r for r in roster_list}
    return entries, index_users(user_list), rosters_by_id


def derive_matchups(
    matchups: Any,
    users: Any,
    rosters: Any,
    week: int,
    history: Mapping[int, Sequence[float]] | None = None,
    model: ProbabilityModel = DEFAULT_MODEL,
    strict: bool = False,
) -> list[ProcessedMatchup]:
    """Pair up a week's matchup entries and attach win probabilities.

    Groups that do not hold exactly two entries are dropped, or raise
    ``MalformedDataError`` when ``strict`` is set. Output is ordered by
    matchup id.
    """
    resolved = resolve_inputs(matchups, users, rosters, "matchups")
    if resolved is None:
        return []
    entries, users_by_id, rosters_by_id = resolved
    history = history or {}

    out: list[ProcessedMatchup] = []
    for mid, group in sorted(group_rows(entries).items()):
        if len(group) != 2:
            if strict:
                raise MalformedDataError("matchups", f"matchup {mid} has {len(group)} entries")
            if mid >= 0:
                logger.debug("matchup %s has %d entries; skipped", mid, len(group))
            continue
        a, b = (
            build_team_view(
                e,
                rosters_by_id.get(e.roster_id),
                owner_of(rosters_by_id.get(e.roster_id), users_by_id),
                week,
                history.get(e.roster_id),
            )
            for e in group
        )
        p = win_probability(a.points, b.points, a.projection, b.projection, model)
        a.win_probability = p
        b.win_probability = 1.0 - p if p is not None else None
        out.append(ProcessedMatchup(matchup_id=mid, teams=(a, b)))
    return out


def weekly_points(matchups_by_week: Mapping[int, Any]) -> dict[int, list[float]]:
    """roster_id -> points per week (ascending weeks), skipping unplayed weeks."""
    out: dict[int, list[float]] = {}
    for _wk, rows in sorted(matchups_by_week.items()):
        entries = coerce_records(MatchupEntry, rows)
        if not entries:
            continue
        for e in entries:
            pts = effective_points(e)
            if pts is not None:
                out.setdefault(e.roster_id, []).append(pts)
    return out
