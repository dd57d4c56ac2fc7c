"""Request coordination on top of ``SleeperClient``.

The coordinator makes the client safe to call from many view builders at once:

- one in-flight task per endpoint; concurrent callers share it
- successful results cached for ``ttl`` seconds, evicted by a timer
- request starts paced by a minimum interval, one blocking call at a time
- rate-limit responses retried with exponential backoff, bounded attempts

All state lives on this object and is only touched from the event loop; the
blocking HTTP call runs in a worker thread via ``asyncio.to_thread``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from ffboard.constants import (
    DEFAULT_BACKOFF_BASE_SEC,
    DEFAULT_CACHE_TTL_SEC,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MIN_INTERVAL_SEC,
)

from . import schemas
from .client import Fetched, SleeperClient
from .errors import RateLimitedError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _CacheEntry:
    value: Fetched
    expires_at: float


class Pacer:
    """Minimum interval between consecutive request starts.

    Async counterpart of a wall-clock rate limiter: callers queue on a lock and
    each waits until ``min_interval`` has elapsed since the previous start.
    """

    def __init__(self, min_interval: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.min_interval = max(0.0, float(min_interval))
        self._clock = clock
        self._last: float | None = None
        self._lock = asyncio.Lock()

    async def _space(self) -> None:
        if self._last is not None:
            remaining = self.min_interval - (self._clock() - self._last)
            if remaining > 0:
                await asyncio.sleep(remaining)
        self._last = self._clock()

    async def wait(self) -> None:
        async with self._lock:
            await self._space()

    async def run(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run blocking ``func`` in a worker thread, one call at a time.

        The lock is held for the whole call: the shared ``requests.Session``
        is never used from two threads at once.
        """
        async with self._lock:
            await self._space()
            return await asyncio.to_thread(func, *args)


class RequestCoordinator:
    def __init__(
        self,
        client: SleeperClient,
        ttl: float = DEFAULT_CACHE_TTL_SEC,
        min_interval: float = DEFAULT_MIN_INTERVAL_SEC,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_base: float = DEFAULT_BACKOFF_BASE_SEC,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.ttl = float(ttl)
        self.max_attempts = max(1, int(max_attempts))
        self.backoff_base = max(0.0, float(backoff_base))
        self._clock = clock
        self._pacer = Pacer(min_interval, clock)
        self._cache: dict[str, _CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self.network_calls = 0

    @classmethod
    def from_settings(cls, settings, session=None) -> "RequestCoordinator":
        client = SleeperClient(settings.allowed_league_ids, base_url=settings.base_url, session=session)
        return cls(
            client,
            ttl=settings.cache_ttl_sec,
            min_interval=settings.min_interval_sec,
            max_attempts=settings.max_attempts,
            backoff_base=settings.backoff_base_sec,
        )

    # ------------------------------------------------------------------ cache
    def _cached(self, key: str) -> Fetched | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            self._cache.pop(key, None)
            return None
        return entry.value

    def _store(self, key: str, value: Fetched) -> None:
        entry = _CacheEntry(value, self._clock() + self.ttl)
        self._cache[key] = entry
        asyncio.get_running_loop().call_later(self.ttl, self._evict, key, entry)

    def _evict(self, key: str, entry: _CacheEntry) -> None:
        # A newer entry for the same key keeps its own timer
        if self._cache.get(key) is entry:
            del self._cache[key]

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._cache.clear()
        else:
            self._cache.pop(key, None)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    # ---------------------------------------------------------------- fetches
    async def fetch(self, resource: str, *args: Any) -> Fetched:
        """Return the shared, possibly cached, ``Fetched`` value for an endpoint.

        ``NotAllowedError`` is raised before the cache or the network is touched.
        """
        key = self.client.endpoint(resource, *args)
        hit = self._cached(key)
        if hit is not None:
            logger.debug("cache hit %s", key)
            return hit
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, resource, args))
            self._inflight[key] = task
            task.add_done_callback(lambda _t, k=key: self._inflight.pop(k, None))
        else:
            logger.debug("joining in-flight request %s", key)
        # A cancelled caller must not cancel the request other callers wait on
        return await asyncio.shield(task)

    async def _load(self, key: str, resource: str, args: tuple) -> Fetched:
        method = getattr(self.client, resource)
        attempt = 0
        while True:
            attempt += 1
            self.network_calls += 1
            try:
                value = await self._pacer.run(method, *args)
            except RateLimitedError:
                if attempt >= self.max_attempts:
                    logger.warning("rate limited on %s after %d attempts", key, attempt)
                    raise
                delay = self.backoff_base * (2 ** (attempt - 1))
                logger.info("rate limited on %s; retrying in %.2fs (attempt %d)", key, delay, attempt)
                await asyncio.sleep(delay)
                continue
            self._store(key, value)
            return value

    # ------------------------------------------------------------ typed views
    async def league(self, league_id: str) -> schemas.League:
        return (await self.fetch("league", league_id)).data

    async def users(self, league_id: str) -> list[schemas.User]:
        return (await self.fetch("users", league_id)).data

    async def rosters(self, league_id: str) -> list[schemas.Roster]:
        return (await self.fetch("rosters", league_id)).data

    async def matchups(self, league_id: str, week: int) -> list[schemas.MatchupEntry]:
        return (await self.fetch("matchups", league_id, week)).data

    async def transactions(self, league_id: str, week: int) -> list[schemas.Transaction]:
        return (await self.fetch("transactions", league_id, week)).data

    async def drafts(self, league_id: str) -> list[schemas.Draft]:
        return (await self.fetch("drafts", league_id)).data

    async def draft_picks(self, draft_id: str) -> list[schemas.Pick]:
        return (await self.fetch("draft_picks", draft_id)).data
