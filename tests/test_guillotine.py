from ffboard.compute import derive_guillotine, field_rank_matchups
from ffboard.compute.guillotine import (
    ZONE_CHOPPED,
    ZONE_DANGER,
    ZONE_SAFE,
    ZONE_SUPER_SAFE,
    rows_by_zone,
    safety_pct,
    zone_cutoffs,
)

from conftest import entry, roster, user


def _league(scores):
    users = [user(f"u{rid}", f"Owner {rid}") for rid in scores]
    rosters = [roster(rid, f"u{rid}") for rid in scores]
    rows = [entry(rid, None, pts, ["p"] if pts is not None else []) for rid, pts in scores.items()]
    return rows, users, rosters


def test_twelve_team_ranking_and_zones():
    scores = {rid: 150 - 10 * (rid - 1) for rid in range(1, 13)}
    rows = derive_guillotine(*_league(scores), week=4)
    assert rows[0].rank == 1 and rows[0].team.points == 150
    assert rows[-1].rank == 12 and rows[-1].team.points == 40
    assert rows[-1].zone == ZONE_CHOPPED
    assert [r.zone for r in rows] == (
        [ZONE_SUPER_SAFE] * 3 + [ZONE_SAFE] * 3 + [ZONE_DANGER] * 3 + [ZONE_CHOPPED] * 3
    )
    assert rows[0].safety_pct == 95
    assert rows[-1].safety_pct == 26.7


def test_ties_break_on_roster_id():
    rows = derive_guillotine(*_league({7: 80.0, 3: 80.0, 5: 90.0}), week=2)
    assert [r.team.roster_id for r in rows] == [5, 3, 7]


def test_pre_game_rows_are_safe():
    rows = derive_guillotine(*_league({1: 100.0, 2: 60.0, 3: None, 4: 20.0}), week=2)
    pre = next(r for r in rows if r.team.roster_id == 3)
    assert pre.zone == ZONE_SAFE
    assert pre.safety_pct == 50
    assert pre.team.win_probability is None
    assert [r.team.roster_id for r in rows] == [1, 2, 4, 3]
    assert rows[2].zone == ZONE_DANGER


def test_zone_cutoffs_small_leagues():
    assert zone_cutoffs(12) == (3, 6, 9)
    assert zone_cutoffs(2) == (1, 1, 1)
    assert zone_cutoffs(0) == (0, 0, 0)
    assert zone_cutoffs(18) == (5, 9, 14)


def test_safety_pct_bounds():
    assert safety_pct(None, 100) == 50
    assert safety_pct(10, 0) == 50
    assert safety_pct(1, 100) == 5
    assert safety_pct(60, 120) == 50.0


def test_field_rank_placeholders():
    rows = derive_guillotine(*_league({1: 100.0, 2: 60.0}), week=2)
    pairs = field_rank_matchups(rows)
    assert len(pairs) == 2
    team, placeholder = pairs[1].teams
    assert team.roster_id == 2
    assert placeholder.roster_id == 1000
    assert placeholder.team_name == "Rank #2"
    assert placeholder.win_probability is None


def test_rows_by_zone_worst_first():
    scores = {rid: 100 - rid for rid in range(1, 9)}
    grouped = rows_by_zone(derive_guillotine(*_league(scores), week=2))
    assert list(grouped) == [ZONE_CHOPPED, ZONE_DANGER, ZONE_SAFE, ZONE_SUPER_SAFE]
    assert [r.rank for r in grouped[ZONE_CHOPPED]] == [8, 7]


def test_malformed_payload_returns_empty():
    assert derive_guillotine(None, [], [], week=1) == []
