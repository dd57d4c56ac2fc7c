"""Error taxonomy for upstream access and derivation."""

from __future__ import annotations


class BoardError(Exception):
    """Base class for every error raised by ffboard."""


class NotAllowedError(BoardError):
    """League id is not in the configured allow-list. Never retried."""

    def __init__(self, league_id: str) -> None:
        super().__init__(f"League not allowed: {league_id}")
        self.league_id = league_id


class UpstreamError(BoardError):
    def __init__(self, status: int | None, endpoint: str, message: str | None = None) -> None:
        detail = message or (f"HTTP {status}" if status is not None else "request failed")
        super().__init__(f"Sleeper API error on {endpoint}: {detail}")
        self.status = status
        self.endpoint = endpoint


class RateLimitedError(UpstreamError):
    """429, or an HTML/non-JSON body where JSON was expected."""

    def __init__(self, endpoint: str, status: int | None = 429, message: str | None = None) -> None:
        super().__init__(status, endpoint, message or "rate limited")


class MalformedDataError(BoardError):
    def __init__(self, endpoint: str, message: str) -> None:
        super().__init__(f"Malformed payload from {endpoint}: {message}")
        self.endpoint = endpoint


class UnsupportedFormatError(BoardError):
    def __init__(self, league_format: str) -> None:
        super().__init__(f"League format not supported: {league_format}")
        self.league_format = league_format
