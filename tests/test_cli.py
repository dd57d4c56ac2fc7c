import json

import pytest

from ffboard.cli.board import _league, build_parser, main, write_snapshot

from conftest import H2H_ID, entry, make_coordinator, roster, user

ROUTES = {
    f"/league/{H2H_ID}/users": [user("u1", "Alice"), user("u2", "Bob")],
    f"/league/{H2H_ID}/rosters": [roster(1, "u1"), roster(2, "u2")],
    f"/league/{H2H_ID}/matchups/2": [entry(1, 1, 75.0, ["a"]), entry(2, 1, 70.0, ["b"])],
}


def test_write_snapshot_files(settings, tmp_path):
    coord, _ = make_coordinator(ROUTES)
    summary = write_snapshot(
        settings,
        settings.by_key("ppr-1"),
        week=2,
        output_formats=["markdown", "json"],
        out_dir=str(tmp_path),
        coordinator=coord,
    )
    assert summary["week"] == 2
    assert summary["entries"]["matchups"] == 1
    md_path = tmp_path / "ppr-1" / "week-02.md"
    assert md_path.read_text(encoding="utf-8").startswith("# PPR 1")
    payload = json.loads((tmp_path / "ppr-1" / "week-02.json").read_text(encoding="utf-8"))
    assert payload["league"]["league_id"] == H2H_ID
    assert summary["formats"]["json"]["written"] is True


def test_write_snapshot_dry_run(settings, tmp_path):
    coord, _ = make_coordinator(ROUTES)
    summary = write_snapshot(
        settings, settings.by_key("ppr-1"), week=2, out_dir=str(tmp_path), dry_run=True, coordinator=coord
    )
    assert summary["formats"]["markdown"]["written"] is False
    assert not (tmp_path / "ppr-1").exists()


def test_write_snapshot_rejects_unknown_format(settings, tmp_path):
    coord, _ = make_coordinator(ROUTES)
    with pytest.raises(ValueError):
        write_snapshot(settings, settings.by_key("ppr-1"), week=2, output_formats=["pdf"],
                       out_dir=str(tmp_path), coordinator=coord)


def test_league_lookup(settings):
    assert _league(settings, "ppr-1").league_id == H2H_ID
    assert _league(settings, H2H_ID).key == "ppr-1"
    with pytest.raises(ValueError):
        _league(settings, "nope")


def test_parser():
    args = build_parser().parse_args(["snapshot", "--league", "ppr-1", "--json-compact", "--week", "4"])
    assert args.json_pretty is False and args.week == 4
    args = build_parser().parse_args(["week", "--league", "ppr-1", "--today", "2025-09-20"])
    assert args.today.isoformat() == "2025-09-20"


def test_main_reports_errors(tmp_path, capsys):
    missing = tmp_path / "missing.yaml"
    assert main(["--config", str(missing), "standings", "--league", "ppr-1"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_write_snapshot_uses_given_coordinator(settings, tmp_path):
    coord, session = make_coordinator(ROUTES)
    assert coord.cache_size == 0
    write_snapshot(settings, settings.by_key("ppr-1"), week=2, out_dir=str(tmp_path), dry_run=True,
                   coordinator=coord)
    assert session.count(f"/league/{H2H_ID}/users") == 1
    assert coord.network_calls == len(session.calls)
