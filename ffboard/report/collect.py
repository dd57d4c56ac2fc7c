"""Assembly of league views from the coordinator and the derivers."""

from __future__ import annotations

import asyncio
import datetime
import logging

from ffboard.api.coordinator import RequestCoordinator
from ffboard.api.errors import MalformedDataError, UnsupportedFormatError, UpstreamError
from ffboard.api.schemas import MatchupEntry
from ffboard.compute import (
    derive_draft_board,
    derive_drafts,
    derive_guillotine,
    derive_managers,
    derive_matchups,
    derive_standings,
    field_rank_matchups,
    infer_current_week,
)
from ffboard.compute.matchups import weekly_points
from ffboard.compute.models import Manager, StandingsRow
from ffboard.compute.probability import ProbabilityModel
from ffboard.config import LeagueConfig, Settings
from ffboard.constants import DISPLAY_FORMATS, FORMAT_GUILLOTINE, MIN_WEEK, TRAILING_WEEKS

from .models import DraftsReport, LeagueView, Provenance

logger = logging.getLogger(__name__)


async def _matchups_or_empty(
    coordinator: RequestCoordinator, league_id: str, week: int
) -> list[MatchupEntry]:
    try:
        return await coordinator.matchups(league_id, week)
    except (UpstreamError, MalformedDataError) as e:
        logger.warning("matchups for league %s week %d unavailable: %s", league_id, week, e)
        return []


async def collect_history(
    coordinator: RequestCoordinator, league_id: str, week: int, window: int = TRAILING_WEEKS
) -> dict[int, list[float]]:
    """Per-roster points for the ``window`` weeks before ``week``."""
    weeks = list(range(max(MIN_WEEK, week - window), week))
    if not weeks:
        return {}
    results = await asyncio.gather(*(_matchups_or_empty(coordinator, league_id, wk) for wk in weeks))
    return weekly_points(dict(zip(weeks, results)))


async def build_league_view(
    coordinator: RequestCoordinator,
    league: LeagueConfig,
    settings: Settings,
    week: int | None = None,
    today: datetime.date | None = None,
    model: ProbabilityModel | None = None,
) -> LeagueView:
    """Infer the week, fetch, derive and package one league for display.

    Pool formats raise ``UnsupportedFormatError``. A failed matchup fetch
    yields an empty view; users/rosters failures propagate.
    """
    if league.format not in DISPLAY_FORMATS:
        raise UnsupportedFormatError(league.format)
    if week is None:
        week = await infer_current_week(
            coordinator, league.league_id, settings.season_start, league.format, today
        )
    users_f, rosters_f, entries = await asyncio.gather(
        coordinator.fetch("users", league.league_id),
        coordinator.fetch("rosters", league.league_id),
        _matchups_or_empty(coordinator, league.league_id, week),
    )
    history = await collect_history(coordinator, league.league_id, week)
    users, rosters = users_f.data, rosters_f.data

    if league.format == FORMAT_GUILLOTINE:
        rows = derive_guillotine(entries, users, rosters, week, history)
        matchups = field_rank_matchups(rows)
    else:
        rows = []
        model = model or ProbabilityModel.from_overrides(settings.probability)
        matchups = derive_matchups(entries, users, rosters, week, history, model)

    view = LeagueView(
        league_key=league.key,
        league_id=league.league_id,
        league_name=league.name,
        league_type=league.type,
        format=league.format,
        week=week,
        matchups=matchups,
        standings=derive_standings(users, rosters),
        guillotine=rows,
        provenance=Provenance(
            digest=users_f.digest,
            fetched_at=users_f.fetched_at,
            source=users_f.source,
            endpoint=users_f.endpoint,
        ),
        site_title=settings.site_title,
        season=settings.season,
    )
    logger.info(
        "%s week %d: %d matchups, %d guillotine rows",
        league.name, week, len(view.matchups), len(view.guillotine),
    )
    return view


async def build_standings(coordinator: RequestCoordinator, league_id: str) -> list[StandingsRow]:
    users, rosters = await asyncio.gather(coordinator.users(league_id), coordinator.rosters(league_id))
    return derive_standings(users, rosters)


async def build_managers(coordinator: RequestCoordinator, league_id: str) -> list[Manager]:
    return derive_managers(await coordinator.users(league_id))


async def build_drafts(
    coordinator: RequestCoordinator, league_id: str, include_picks: bool = False
) -> DraftsReport:
    drafts, users = await asyncio.gather(coordinator.drafts(league_id), coordinator.users(league_id))
    report = DraftsReport(league_id=league_id, drafts=derive_drafts(drafts, users))
    if include_picks and report.drafts:
        rosters = await coordinator.rosters(league_id)
        for d in report.drafts:
            picks = await coordinator.draft_picks(d.draft_id)
            report.boards[d.draft_id] = derive_draft_board(picks, users, rosters)
    return report
