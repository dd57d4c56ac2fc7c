"""HTTP client for the Sleeper API.

This module centralizes the upstream edge:
- allow-list enforcement before any network call
- week clamping into the regular-season range
- a requests.Session whose adapter retries connection/read failures only
- mapping of HTTP outcomes onto the ffboard error taxonomy
- schema validation of every payload (see ``ffboard.api.schemas``)

Status-based retries (429, HTML throttle pages) belong to the request
coordinator.
"""

from __future__ import annotations

import datetime
import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ffboard.constants import DEFAULT_BASE_URL, MAX_WEEK, MIN_WEEK, REQUEST_TIMEOUT_SEC, USER_AGENT

from . import schemas
from .errors import NotAllowedError, RateLimitedError, UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RESOURCES = ("league", "users", "rosters", "matchups", "transactions", "drafts", "draft_picks")


@dataclass(frozen=True, slots=True)
class Fetched(Generic[T]):
    """Validated payload plus provenance of the raw body it came from."""

    endpoint: str
    data: T
    digest: str
    fetched_at: datetime.datetime
    source: str = "sleeper"


def clamp_week(week: int) -> int:
    return max(MIN_WEEK, min(MAX_WEEK, int(week)))


class SleeperClient:
    """Thin wrapper around requests.Session for the Sleeper API.

    Only GET + JSON is implemented; the dashboard never writes upstream.
    ``session`` can be injected (tests pass a fake with a ``get`` method).
    """

    def __init__(
        self,
        allowed_league_ids: Iterable[str],
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SEC,
    ) -> None:
        self.allowed = frozenset(str(x) for x in allowed_league_ids)
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else self._make_session()

    @staticmethod
    def _make_session() -> requests.Session:
        session = requests.Session()
        session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
        # Transport-level retries only; status codes are surfaced to the caller
        retry = Retry(
            total=3,
            connect=3,
            read=3,
            status=0,
            backoff_factor=0.5,
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    # ------------------------------------------------------------------ paths
    def _check_league(self, league_id: str) -> str:
        lid = str(league_id)
        if lid not in self.allowed:
            raise NotAllowedError(lid)
        return lid

    def endpoint(self, resource: str, *args: Any) -> str:
        """Request path for ``resource``; also the coordinator's cache key."""
        if resource == "draft_picks":
            (draft_id,) = args
            return f"/draft/{draft_id}/picks"
        if resource not in RESOURCES:
            raise ValueError(f"Unknown resource: {resource}")
        lid = self._check_league(args[0])
        if resource == "league":
            return f"/league/{lid}"
        if resource in ("matchups", "transactions"):
            return f"/league/{lid}/{resource}/{clamp_week(args[1])}"
        return f"/league/{lid}/{resource}"

    # ------------------------------------------------------------------- http
    def get_json(self, path: str) -> tuple[Any, str]:
        """GET ``base_url + path``; return decoded JSON and the SHA-256 of the body."""
        try:
            r = self.session.get(self.base_url + path, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(None, path, str(e)) from e
        if r.status_code == 429:
            raise RateLimitedError(path)
        if not 200 <= r.status_code < 300:
            raise UpstreamError(r.status_code, path)
        raw = r.text or ""
        ctype = (r.headers.get("Content-Type") or "").lower()
        if "html" in ctype or raw.lstrip().startswith("<"):
            raise RateLimitedError(path, status=r.status_code, message="HTML body instead of JSON")
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise RateLimitedError(path, status=r.status_code, message="non-JSON body") from e
        digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()
        return data, digest

    def _fetch(self, path: str, parse: Callable[[Any, str], T]) -> Fetched[T]:
        logger.debug("GET %s", path)
        payload, digest = self.get_json(path)
        return Fetched(
            endpoint=path,
            data=parse(payload, path),
            digest=digest,
            fetched_at=datetime.datetime.now(datetime.timezone.utc),
        )

    # -------------------------------------------------------------- resources
    def league(self, league_id: str) -> Fetched[schemas.League]:
        return self._fetch(
            self.endpoint("league", league_id),
            lambda p, ep: schemas.parse_one(schemas.League, p, ep),
        )

    def users(self, league_id: str) -> Fetched[list[schemas.User]]:
        return self._fetch(
            self.endpoint("users", league_id),
            lambda p, ep: schemas.parse_list(schemas.User, p, ep),
        )

    def rosters(self, league_id: str) -> Fetched[list[schemas.Roster]]:
        return self._fetch(
            self.endpoint("rosters", league_id),
            lambda p, ep: schemas.parse_list(schemas.Roster, p, ep),
        )

    def matchups(self, league_id: str, week: int) -> Fetched[list[schemas.MatchupEntry]]:
        return self._fetch(
            self.endpoint("matchups", league_id, week),
            lambda p, ep: schemas.parse_list(schemas.MatchupEntry, p, ep),
        )

    def transactions(self, league_id: str, week: int) -> Fetched[list[schemas.Transaction]]:
        return self._fetch(
            self.endpoint("transactions", league_id, week),
            lambda p, ep: schemas.parse_list(schemas.Transaction, p, ep),
        )

    def drafts(self, league_id: str) -> Fetched[list[schemas.Draft]]:
        return self._fetch(
            self.endpoint("drafts", league_id),
            lambda p, ep: schemas.parse_list(schemas.Draft, p, ep),
        )

    def draft_picks(self, draft_id: str) -> Fetched[list[schemas.Pick]]:
        return self._fetch(
            self.endpoint("draft_picks", draft_id),
            lambda p, ep: schemas.parse_list(schemas.Pick, p, ep),
        )


__all__ = ["Fetched", "RESOURCES", "SleeperClient", "clamp_week"]
