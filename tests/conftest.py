import datetime
import json

import pytest

from ffboard.api.client import SleeperClient
from ffboard.api.coordinator import RequestCoordinator
from ffboard.config import LeagueConfig, Settings

BASE = "https://api.test/v1"
H2H_ID = "1267607910209306624"
GUILLOTINE_ID = "1269339474479824896"
POOL_ID = "1257745106425872384"
SEASON_START = datetime.date(2025, 9, 4)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None, content_type="application/json"):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload)
        self.headers = {"Content-Type": content_type}


class FakeSession:
    """Route table keyed by path; a list value is served in order, last one repeating."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, timeout=None):
        path = url[len(BASE):]
        self.calls.append(path)
        if path not in self.routes:
            return FakeResponse(404, text="not found", content_type="text/plain")
        route = self.routes[path]
        if isinstance(route, list) and route and all(isinstance(r, FakeResponse) for r in route):
            idx = min(self.calls.count(path) - 1, len(route) - 1)
            return route[idx]
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(200, route)

    def count(self, path):
        return self.calls.count(path)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_coordinator(routes=None, allowed=(H2H_ID, GUILLOTINE_ID, POOL_ID), **kwargs):
    session = FakeSession(routes)
    client = SleeperClient(allowed, base_url=BASE, session=session)
    kwargs.setdefault("min_interval", 0.0)
    kwargs.setdefault("backoff_base", 0.0)
    return RequestCoordinator(client, **kwargs), session


def user(uid, name, team=None, avatar=None, username=None):
    u = {"user_id": uid, "display_name": name, "username": username or name.lower(), "avatar": avatar}
    if team:
        u["metadata"] = {"team_name": team}
    return u


def roster(rid, owner, wins=0, losses=0, ties=0, fpts=0, fpts_decimal=0, rank=None):
    settings = {"wins": wins, "losses": losses, "ties": ties, "fpts": fpts, "fpts_decimal": fpts_decimal}
    if rank is not None:
        settings["rank"] = rank
    return {"roster_id": rid, "owner_id": owner, "settings": settings}


def entry(rid, mid, points=None, starters=None):
    return {"roster_id": rid, "matchup_id": mid, "points": points, "starters": starters or []}


@pytest.fixture
def settings():
    return Settings(
        season="2025",
        season_start=SEASON_START,
        leagues=(
            LeagueConfig("ppr-1", "PPR 1", H2H_ID, "h2h", "PPR"),
            LeagueConfig("guillotine-1", "Guillotine 1", GUILLOTINE_ID, "guillotine", "Guillotine"),
        ),
        pools=(LeagueConfig("pickem", "Pick Em", POOL_ID, "pickem", "Pick Em"),),
        base_url=BASE,
        min_interval_sec=0.0,
        backoff_base_sec=0.0,
        retry_delay_sec=0.0,
        rotation_sec=0.0,
    )
