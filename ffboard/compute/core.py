from __future__ import annotations

from typing import Iterable

from ffboard.api.schemas import MatchupEntry, Roster, User
from ffboard.constants import AVATAR_THUMB_URL


def _coerce_int(value: object, default: int = 0) -> int:
    """Best‑effort int conversion (supports int, float, str of digits)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return default
    return default


def reassemble_points(whole: float | None, decimal: float | None) -> float:
    """Sleeper splits totals into an integer part and hundredths; missing halves count as 0."""
    return round(float(whole or 0) + float(decimal or 0) / 100.0, 2)


def points_for(roster: Roster | None) -> float:
    s = roster.settings if roster else None
    return reassemble_points(s.fpts, s.fpts_decimal) if s else 0.0


def points_against(roster: Roster | None) -> float:
    s = roster.settings if roster else None
    return reassemble_points(s.fpts_against, s.fpts_against_decimal) if s else 0.0


def games_played(roster: Roster | None) -> int:
    s = roster.settings if roster else None
    if not s:
        return 0
    return _coerce_int(s.wins) + _coerce_int(s.losses) + _coerce_int(s.ties)


def effective_points(entry: MatchupEntry) -> float | None:
    """Points for display, ``None`` while the side has not started.

    A nonzero score is always real. Zero (or missing) counts as played only
    when starters are set; without starters the side is pre-game.
    """
    if entry.points is not None and entry.points != 0:
        return float(entry.points)
    if any(entry.starters or []):
        return float(entry.points or 0)
    return None


def has_activity(entry: MatchupEntry) -> bool:
    return (entry.points or 0) > 0 or any(entry.starters or [])


def group_rows(rows: Iterable[MatchupEntry]) -> dict[int, list[MatchupEntry]]:
    groups: dict[int, list[MatchupEntry]] = {}
    for row in rows or []:
        if row.matchup_id is None:
            # Create deterministic synthetic id using roster_id when missing
            mid = -100000 - row.roster_id
        else:
            mid = row.matchup_id
        groups.setdefault(mid, []).append(row)
    return groups


def avatar_url(avatar_id: str | None) -> str | None:
    if not avatar_id:
        return None
    return AVATAR_THUMB_URL.format(avatar_id=avatar_id)


def index_users(users: Iterable[User]) -> dict[str, User]:
    return {u.user_id: u for u in users or [] if u.user_id}


def owner_of(roster: Roster | None, users_by_id: dict[str, User]) -> User | None:
    """Roster owner, falling back to the first known co-owner."""
    if roster is None:
        return None
    if roster.owner_id and roster.owner_id in users_by_id:
        return users_by_id[roster.owner_id]
    for uid in roster.co_owners or []:
        if uid in users_by_id:
            return users_by_id[uid]
    return None


def handle_for(user: User | None) -> str:
    if user is None:
        return "unknown"
    if user.username:
        return user.username
    if user.display_name:
        return "".join(user.display_name.lower().split())
    return "unknown"


def seed_label(roster: Roster | None) -> str:
    rank = roster.settings.rank if roster and roster.settings else None
    return f"(#{rank})" if rank else "(#—)"
