"""Season standings from roster records."""

from __future__ import annotations

import logging
from typing import Any

from ffboard.api.schemas import Roster, User, coerce_records

from .core import _coerce_int, index_users, owner_of, points_against, points_for
from .models import StandingsRow

logger = logging.getLogger(__name__)


def derive_standings(users: Any, rosters: Any) -> list[StandingsRow]:
    """Rank rosters by (wins desc, points for desc).

    Python's sort is stable, so rosters tied on both keys keep their input
    order. Rosters without a resolvable owner are kept with placeholder names.
    An all-zero preseason table is a valid result.
    """
    user_list = coerce_records(User, users)
    roster_list = coerce_records(Roster, rosters)
    if user_list is None or roster_list is None:
        logger.warning("standings: malformed users/rosters payload, returning empty table")
        return []
    by_id = index_users(user_list)

    rows = []
    for roster in roster_list:
        user = owner_of(roster, by_id)
        s = roster.settings
        rows.append(
            StandingsRow(
                roster_id=roster.roster_id,
                team_name=(user and (user.team_name or user.display_name)) or "Unknown Team",
                owner_name=(user and user.display_name) or "Unknown Owner",
                wins=_coerce_int(s.wins if s else None),
                losses=_coerce_int(s.losses if s else None),
                ties=_coerce_int(s.ties if s else None),
                points_for=points_for(roster),
                points_against=points_against(roster),
            )
        )
    rows.sort(key=lambda r: (-r.wins, -r.points_for))
    return rows
