"""TV mode: rotate through leagues, one display state per slot.

Each slot loads a league view under a wall-clock timeout. Transient failures
publish a generic connection-issue state, wait ``retry_delay_sec`` and try
again, up to ``max_display_retries``. Permanent failures (not allowed,
unsupported format) are published once and the rotation moves on.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
from typing import Awaitable, Callable, Sequence

from ffboard.api.coordinator import RequestCoordinator
from ffboard.api.errors import BoardError, NotAllowedError, UnsupportedFormatError
from ffboard.config import LeagueConfig, Settings

from .collect import build_league_view
from .models import DisplayState

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "League format not supported"
TIMEOUT_MESSAGE = "Loading timeout - the display will automatically retry"


class Rotation:
    def __init__(
        self,
        coordinator: RequestCoordinator,
        settings: Settings,
        publish: Callable[[DisplayState], None],
        leagues: Sequence[LeagueConfig] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        today: datetime.date | None = None,
    ) -> None:
        self.coordinator = coordinator
        self.settings = settings
        self.publish = publish
        self.leagues = list(leagues if leagues is not None else settings.leagues)
        if not self.leagues:
            raise ValueError("Rotation needs at least one league")
        self._sleep = sleep
        self.today = today
        self.index = 0

    @property
    def current(self) -> LeagueConfig:
        return self.leagues[self.index]

    def advance(self) -> LeagueConfig:
        self.index = (self.index + 1) % len(self.leagues)
        return self.current

    async def load(self, league: LeagueConfig) -> DisplayState:
        max_retries = self.settings.max_display_retries
        retry = 0
        while True:
            try:
                view = await asyncio.wait_for(
                    build_league_view(self.coordinator, league, self.settings, today=self.today),
                    timeout=self.settings.load_timeout_sec,
                )
                return DisplayState(league.key, league.name, view=view, max_retries=max_retries)
            except (UnsupportedFormatError, NotAllowedError) as e:
                logger.warning("%s: %s", league.name, e)
                return DisplayState(league.key, league.name, error=UNSUPPORTED_MESSAGE, max_retries=max_retries)
            except asyncio.TimeoutError:
                logger.warning("%s: load exceeded %.1fs", league.name, self.settings.load_timeout_sec)
                message = TIMEOUT_MESSAGE
            except BoardError as e:
                logger.warning("%s: load failed: %s", league.name, e)
                message = f"Failed to load data for {league.name}"
            retry += 1
            state = DisplayState(league.key, league.name, error=message, retry_count=retry, max_retries=max_retries)
            if retry >= max_retries:
                return state
            self.publish(state)
            await self._sleep(self.settings.retry_delay_sec)

    async def run(self, cycles: int | None = None) -> None:
        """Show ``cycles`` slots (forever when ``None``), pausing between slots."""
        shown = 0
        while cycles is None or shown < cycles:
            state = await self.load(self.current)
            self.publish(state)
            shown += 1
            self.advance()
            if cycles is None or shown < cycles:
                await self._sleep(self.settings.rotation_sec)
