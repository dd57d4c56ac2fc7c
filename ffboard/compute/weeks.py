"""Current-week inference.

The calendar gives an upper bound; matchup data decides the week inside it.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from ffboard.api.errors import MalformedDataError, UpstreamError
from ffboard.api.schemas import MatchupEntry, coerce_records
from ffboard.constants import FORMAT_H2H, MAX_WEEK, MIN_WEEK, POOL_FORMATS

from .core import has_activity

logger = logging.getLogger(__name__)


def provisional_week(season_start: datetime.date, today: datetime.date | None = None) -> int:
    """Calendar week relative to ``season_start``, clamped to the regular season."""
    today = today or datetime.date.today()
    days = (today - season_start).days
    return max(MIN_WEEK, min(MAX_WEEK, days // 7 + 1))


def week_has_data(matchups: Any) -> bool:
    entries = coerce_records(MatchupEntry, matchups)
    if not entries:
        return False
    return any(has_activity(e) for e in entries)


async def infer_current_week(
    coordinator,
    league_id: str,
    season_start: datetime.date,
    league_format: str = FORMAT_H2H,
    today: datetime.date | None = None,
) -> int:
    """First week in ``1..provisional`` (ascending) that has data.

    Weeks are fetched strictly one after another; a failed or malformed week
    counts as empty and the scan moves on. ``NotAllowedError`` is not caught.
    """
    upper = provisional_week(season_start, today)
    for week in range(MIN_WEEK, upper + 1):
        try:
            rows = await coordinator.matchups(league_id, week)
        except (UpstreamError, MalformedDataError) as e:
            logger.info("week scan: league %s week %d unavailable (%s)", league_id, week, e)
            continue
        if week_has_data(rows):
            logger.debug("week scan: league %s -> week %d", league_id, week)
            return week
    fallback = MIN_WEEK if league_format in POOL_FORMATS else upper
    logger.debug("week scan: league %s has no data through week %d; using %d", league_id, upper, fallback)
    return fallback
