import asyncio
import datetime

import pytest

from ffboard.api.errors import UnsupportedFormatError, UpstreamError
from ffboard.report import build_league_view
from ffboard.report.collect import build_drafts, build_managers, build_standings, collect_history

from conftest import (
    GUILLOTINE_ID,
    H2H_ID,
    SEASON_START,
    FakeResponse,
    entry,
    make_coordinator,
    roster,
    user,
)


def _league_routes(league_id, week_rows):
    routes = {
        f"/league/{league_id}/users": [user("u1", "Alice"), user("u2", "Bob"), user("u3", "Cara")],
        f"/league/{league_id}/rosters": [
            roster(1, "u1", wins=2, fpts=250),
            roster(2, "u2", wins=1, losses=1, fpts=230),
            roster(3, "u3", losses=2, fpts=200),
        ],
    }
    for week, rows in week_rows.items():
        routes[f"/league/{league_id}/matchups/{week}"] = rows
    return routes


def test_h2h_view(settings):
    weeks = {
        1: [entry(1, 1, 120, ["a"]), entry(2, 1, 110, ["b"])],
        2: [entry(1, 1, 130, ["a"]), entry(2, 1, 120, ["b"])],
        3: [entry(1, 1, 60.5, ["a"]), entry(2, 1, 48.0, ["b"]), entry(3, 2, 10, ["c"])],
    }
    coord, _ = make_coordinator(_league_routes(H2H_ID, weeks))
    league = settings.by_key("ppr-1")
    view = asyncio.run(build_league_view(coord, league, settings, week=3))
    assert view.week == 3 and view.format == "h2h"
    (m,) = view.matchups
    a, b = m.teams
    assert a.projection == 125.0 and b.projection == 115.0
    assert a.win_probability + b.win_probability == pytest.approx(1.0)
    assert [r.roster_id for r in view.standings] == [1, 2, 3]
    assert view.guillotine == []
    assert len(view.provenance.digest) == 64
    assert view.provenance.endpoint == f"/league/{H2H_ID}/users"
    assert view.source_path == f"/league/{H2H_ID}/matchups/3"
    assert view.site_title == settings.site_title
    assert view.season == "2025"


def test_week_inferred_when_not_given(settings):
    weeks = {1: [entry(1, 1, 90, ["a"]), entry(2, 1, 80, ["b"])]}
    coord, _ = make_coordinator(_league_routes(H2H_ID, weeks))
    today = SEASON_START + datetime.timedelta(days=3)
    view = asyncio.run(build_league_view(coord, settings.by_key("ppr-1"), settings, today=today))
    assert view.week == 1
    # week 1 projects nothing
    assert all(t.projection == 0.0 for t in view.matchups[0].teams)


def test_guillotine_view(settings):
    weeks = {2: [entry(1, None, 95, ["a"]), entry(2, None, 101, ["b"]), entry(3, None, 70, ["c"])]}
    coord, _ = make_coordinator(_league_routes(GUILLOTINE_ID, weeks))
    view = asyncio.run(build_league_view(coord, settings.by_key("guillotine-1"), settings, week=2))
    assert [r.team.roster_id for r in view.guillotine] == [2, 1, 3]
    assert view.guillotine[-1].zone == "chopped"
    assert len(view.matchups) == 3
    assert view.matchups[0].teams[1].team_name == "Rank #1"
    assert all(t.win_probability is None for m in view.matchups for t in m.teams)


def test_matchup_failure_yields_empty_view(settings):
    routes = _league_routes(H2H_ID, {})
    routes[f"/league/{H2H_ID}/matchups/4"] = FakeResponse(503, text="", content_type="text/plain")
    coord, _ = make_coordinator(routes)
    view = asyncio.run(build_league_view(coord, settings.by_key("ppr-1"), settings, week=4))
    assert view.is_empty
    assert len(view.standings) == 3


def test_roster_failure_propagates(settings):
    routes = _league_routes(H2H_ID, {})
    routes[f"/league/{H2H_ID}/rosters"] = FakeResponse(500, text="", content_type="text/plain")
    coord, _ = make_coordinator(routes)
    with pytest.raises(UpstreamError):
        asyncio.run(build_league_view(coord, settings.by_key("ppr-1"), settings, week=2))


def test_pool_format_unsupported(settings):
    coord, session = make_coordinator({})
    with pytest.raises(UnsupportedFormatError):
        asyncio.run(build_league_view(coord, settings.by_key("pickem"), settings, week=1))
    assert session.calls == []


def test_history_window():
    weeks = {w: [entry(1, 1, 10.0 * w, ["a"])] for w in range(1, 6)}
    coord, session = make_coordinator(_league_routes(H2H_ID, weeks))
    history = asyncio.run(collect_history(coord, H2H_ID, 5))
    assert history == {1: [20.0, 30.0, 40.0]}
    assert asyncio.run(collect_history(coord, H2H_ID, 1)) == {}


def test_standings_managers_and_drafts():
    routes = _league_routes(H2H_ID, {})
    routes[f"/league/{H2H_ID}/drafts"] = [{"draft_id": "d1", "draft_order": {"u1": 1, "u2": 2}}]
    routes["/draft/d1/picks"] = [{"round": 1, "pick_no": 1, "roster_id": 1, "player_id": "4046"}]
    coord, session = make_coordinator(routes)

    async def go():
        return (
            await build_standings(coord, H2H_ID),
            await build_managers(coord, H2H_ID),
            await build_drafts(coord, H2H_ID, include_picks=True),
        )

    standings, managers, report = asyncio.run(go())
    assert standings[0].owner_name == "Alice"
    assert [m.user_id for m in managers] == ["u1", "u2", "u3"]
    assert [s.display_name for s in report.drafts[0].draft_order] == ["Alice", "Bob"]
    assert report.boards["d1"][0].manager == "Alice"
    # users were fetched once across all three builders
    assert session.count(f"/league/{H2H_ID}/users") == 1
