from .client import Fetched, SleeperClient, clamp_week
from .coordinator import Pacer, RequestCoordinator
from .errors import (
    BoardError,
    MalformedDataError,
    NotAllowedError,
    RateLimitedError,
    UnsupportedFormatError,
    UpstreamError,
)

__all__ = [
    "Fetched",
    "SleeperClient",
    "clamp_week",
    "Pacer",
    "RequestCoordinator",
    "BoardError",
    "MalformedDataError",
    "NotAllowedError",
    "RateLimitedError",
    "UnsupportedFormatError",
    "UpstreamError",
]
