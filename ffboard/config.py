"""Dashboard configuration: league list, allow-list and tuning knobs.

Configuration comes from a YAML file (package default ``leagues.yaml``,
override with ``FFBOARD_CONFIG``) plus the ``SLEEPER_*`` environment variables
used for network behavior.
"""

from __future__ import annotations

import datetime
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from ffboard.constants import (
    DEFAULT_BACKOFF_BASE_SEC,
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_TTL_SEC,
    DEFAULT_LOAD_TIMEOUT_SEC,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DISPLAY_RETRIES,
    DEFAULT_MIN_INTERVAL_SEC,
    DEFAULT_RETRY_DELAY_SEC,
    DEFAULT_ROTATION_SEC,
    FORMAT_H2H,
)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "leagues.yaml"


@dataclass(frozen=True, slots=True)
class LeagueConfig:
    key: str
    name: str
    league_id: str
    format: str = FORMAT_H2H
    type: str = ""


@dataclass(frozen=True, slots=True)
class Settings:
    season: str
    season_start: datetime.date
    leagues: tuple[LeagueConfig, ...]
    pools: tuple[LeagueConfig, ...] = ()
    site_title: str = "Fantasy Football League"
    base_url: str = DEFAULT_BASE_URL
    min_interval_sec: float = DEFAULT_MIN_INTERVAL_SEC
    cache_ttl_sec: float = DEFAULT_CACHE_TTL_SEC
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_base_sec: float = DEFAULT_BACKOFF_BASE_SEC
    rotation_sec: float = DEFAULT_ROTATION_SEC
    load_timeout_sec: float = DEFAULT_LOAD_TIMEOUT_SEC
    retry_delay_sec: float = DEFAULT_RETRY_DELAY_SEC
    max_display_retries: int = DEFAULT_MAX_DISPLAY_RETRIES
    probability: dict[str, Any] = field(default_factory=dict)

    @property
    def allowed_league_ids(self) -> frozenset[str]:
        return frozenset(lg.league_id for lg in (*self.leagues, *self.pools))

    def by_key(self, key: str) -> LeagueConfig | None:
        for lg in (*self.leagues, *self.pools):
            if lg.key == key:
                return lg
        return None

    def by_league_id(self, league_id: str) -> LeagueConfig | None:
        for lg in (*self.leagues, *self.pools):
            if lg.league_id == league_id:
                return lg
        return None


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name)
    try:
        return float(raw) if raw else None
    except ValueError:
        return None


def min_interval_from_env(default: float = DEFAULT_MIN_INTERVAL_SEC) -> float:
    """Translate SLEEPER_RPM_LIMIT / SLEEPER_MIN_INTERVAL_MS into seconds; larger wins."""
    rpm = _env_float("SLEEPER_RPM_LIMIT")
    min_ms = _env_float("SLEEPER_MIN_INTERVAL_MS")
    min_interval = None
    if rpm and rpm > 0:
        min_interval = max(min_interval or 0.0, 60.0 / rpm)
    if min_ms and min_ms > 0:
        min_interval = max(min_interval or 0.0, min_ms / 1000.0)
    return min_interval if min_interval is not None else default


def _parse_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        return datetime.date.fromisoformat(value.strip())
    raise ValueError(f"season_start must be a date, got {value!r}")


def _parse_leagues(items: Any, section: str) -> tuple[LeagueConfig, ...]:
    if items is None:
        return ()
    if not isinstance(items, list):
        raise ValueError(f"'{section}' must be a list")
    out = []
    for raw in items:
        if not isinstance(raw, dict) or not raw.get("league_id") or not raw.get("key"):
            raise ValueError(f"Invalid entry in '{section}': {raw!r}")
        out.append(
            LeagueConfig(
                key=str(raw["key"]),
                name=str(raw.get("name") or raw["key"]),
                league_id=str(raw["league_id"]),
                format=str(raw.get("format") or FORMAT_H2H).lower(),
                type=str(raw.get("type") or ""),
            )
        )
    return tuple(out)


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML, applying environment overrides.

    Raises:
        FileNotFoundError: config file missing
        ValueError: config file has an invalid structure
    """
    cfg_path = Path(path) if path else Path(os.environ.get("FFBOARD_CONFIG") or DEFAULT_CONFIG_PATH)
    with open(cfg_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {cfg_path}")

    tuning = data.get("tuning") or {}
    probability = data.get("probability") or {}
    if not isinstance(tuning, dict) or not isinstance(probability, dict):
        raise ValueError("'tuning' and 'probability' must be mappings")

    return Settings(
        season=str(data.get("season") or datetime.date.today().year),
        season_start=_parse_date(data.get("season_start")),
        leagues=_parse_leagues(data.get("leagues"), "leagues"),
        pools=_parse_leagues(data.get("pools"), "pools"),
        site_title=str(data.get("site_title") or "Fantasy Football League"),
        base_url=os.environ.get("SLEEPER_BASE_URL") or str(data.get("base_url") or DEFAULT_BASE_URL),
        min_interval_sec=min_interval_from_env(),
        cache_ttl_sec=float(tuning.get("cache_ttl_sec", DEFAULT_CACHE_TTL_SEC)),
        max_attempts=int(tuning.get("max_attempts", DEFAULT_MAX_ATTEMPTS)),
        backoff_base_sec=float(tuning.get("backoff_base_sec", DEFAULT_BACKOFF_BASE_SEC)),
        rotation_sec=float(tuning.get("rotation_sec", DEFAULT_ROTATION_SEC)),
        load_timeout_sec=float(tuning.get("load_timeout_sec", DEFAULT_LOAD_TIMEOUT_SEC)),
        retry_delay_sec=float(tuning.get("retry_delay_sec", DEFAULT_RETRY_DELAY_SEC)),
        max_display_retries=int(tuning.get("max_display_retries", DEFAULT_MAX_DISPLAY_RETRIES)),
        probability=dict(probability),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def clear_settings_cache() -> None:
    get_settings.cache_clear()
