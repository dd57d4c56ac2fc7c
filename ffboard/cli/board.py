from __future__ import annotations

import argparse
import asyncio
import datetime
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from ffboard.api.coordinator import RequestCoordinator
from ffboard.api.errors import BoardError
from ffboard.compute import infer_current_week
from ffboard.compute.models import to_dict
from ffboard.config import LeagueConfig, Settings, load_settings
from ffboard.logging_config import setup_logging
from ffboard.report.collect import build_drafts, build_league_view, build_managers, build_standings
from ffboard.report.formatters import (
    format_display_state,
    format_json,
    format_markdown,
    standings_lines,
)
from ffboard.report.rotation import Rotation


def _pretty(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)


def _league(settings: Settings, key: str) -> LeagueConfig:
    league = settings.by_key(key) or settings.by_league_id(key)
    if league is None:
        known = ", ".join(lg.key for lg in (*settings.leagues, *settings.pools))
        raise ValueError(f"Unknown league '{key}' (known: {known})")
    return league


def write_snapshot(
    settings: Settings,
    league: LeagueConfig,
    *,
    week: int | None = None,
    output_formats: Sequence[str] | None = None,
    out_dir: str = "snapshots",
    json_pretty: bool = True,
    dry_run: bool = False,
    coordinator: RequestCoordinator | None = None,
) -> dict:
    formats = list(output_formats) if output_formats else ["markdown"]
    if coordinator is None:
        coordinator = RequestCoordinator.from_settings(settings)
    view = asyncio.run(build_league_view(coordinator, league, settings, week=week))
    dest_dir = Path(out_dir) / league.key

    results: dict[str, dict[str, Any]] = {}
    for fmt in formats:
        fmt_norm = fmt.lower()
        if fmt_norm in {"md", "markdown"}:
            content = format_markdown(view)
            path = dest_dir / f"week-{view.week:02d}.md"
            key = "markdown"
        elif fmt_norm == "json":
            content = format_json(view, pretty=json_pretty)
            path = dest_dir / f"week-{view.week:02d}.json"
            key = "json"
        else:
            raise ValueError(f"Unsupported format: {fmt}")
        if not dry_run:
            dest_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        results[key] = {"path": str(path), "bytes": len(content), "written": not dry_run}

    return {
        "formats": results,
        "league": league.key,
        "week": view.week,
        "entries": {
            "matchups": len(view.matchups),
            "guillotine": len(view.guillotine),
            "standings": len(view.standings),
        },
    }


def _cmd_week(settings: Settings, args: argparse.Namespace) -> int:
    league = _league(settings, args.league)
    coordinator = RequestCoordinator.from_settings(settings)
    week = asyncio.run(
        infer_current_week(coordinator, league.league_id, settings.season_start, league.format, args.today)
    )
    print(week)
    return 0


def _cmd_snapshot(settings: Settings, args: argparse.Namespace) -> int:
    formats = [f.strip() for f in args.formats.split(",") if f.strip()]
    summary = write_snapshot(
        settings,
        _league(settings, args.league),
        week=args.week,
        output_formats=formats,
        out_dir=args.out_dir,
        json_pretty=args.json_pretty,
        dry_run=args.dry_run,
    )
    print(_pretty(summary))
    return 0


def _cmd_standings(settings: Settings, args: argparse.Namespace) -> int:
    league = _league(settings, args.league)
    rows = asyncio.run(build_standings(RequestCoordinator.from_settings(settings), league.league_id))
    print("\n".join(standings_lines(rows)))
    return 0


def _cmd_managers(settings: Settings, args: argparse.Namespace) -> int:
    league = _league(settings, args.league)
    managers = asyncio.run(build_managers(RequestCoordinator.from_settings(settings), league.league_id))
    print(_pretty([to_dict(m) for m in managers]))
    return 0


def _cmd_drafts(settings: Settings, args: argparse.Namespace) -> int:
    league = _league(settings, args.league)
    report = asyncio.run(
        build_drafts(RequestCoordinator.from_settings(settings), league.league_id, include_picks=args.picks)
    )
    print(
        _pretty(
            {
                "league_id": report.league_id,
                "drafts": [to_dict(d) for d in report.drafts],
                "boards": {k: [to_dict(p) for p in v] for k, v in report.boards.items()},
            }
        )
    )
    return 0


def _cmd_tv(settings: Settings, args: argparse.Namespace) -> int:
    leagues = [_league(settings, k.strip()) for k in args.leagues.split(",") if k.strip()] or None

    def publish(state) -> None:
        print(format_display_state(state), flush=True)

    rotation = Rotation(RequestCoordinator.from_settings(settings), settings, publish, leagues=leagues)
    try:
        asyncio.run(rotation.run(cycles=args.cycles))
    except KeyboardInterrupt:  # pragma: no cover
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ffboard", description="Sleeper league dashboard: matchups, standings, guillotine, drafts"
    )
    parser.add_argument("--config", default=None, help="Path to leagues.yaml (default: packaged/FFBOARD_CONFIG)")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("week", help="Print the inferred current week for a league")
    p.add_argument("--league", required=True, help="League key or league_id")
    p.add_argument(
        "--today", type=datetime.date.fromisoformat, default=None, help="Pretend today is YYYY-MM-DD"
    )
    p.set_defaults(func=_cmd_week)

    p = sub.add_parser("snapshot", help="Write the league view as markdown/json")
    p.add_argument("--league", required=True, help="League key or league_id")
    p.add_argument("--week", type=int, default=None, help="Week to show (default: inferred)")
    p.add_argument("--out-dir", default="snapshots", help="Output directory")
    p.add_argument("--formats", default="markdown", help="Comma-separated list (markdown,json)")
    p.add_argument("--dry-run", action="store_true", help="Build the view but do not write files")
    p.set_defaults(json_pretty=True)
    p.add_argument("--json-compact", dest="json_pretty", action="store_false", help="Compact JSON")
    p.set_defaults(func=_cmd_snapshot)

    p = sub.add_parser("standings", help="Print season standings")
    p.add_argument("--league", required=True, help="League key or league_id")
    p.set_defaults(func=_cmd_standings)

    p = sub.add_parser("managers", help="Print league managers")
    p.add_argument("--league", required=True, help="League key or league_id")
    p.set_defaults(func=_cmd_managers)

    p = sub.add_parser("drafts", help="Print drafts and, optionally, their picks")
    p.add_argument("--league", required=True, help="League key or league_id")
    p.add_argument("--picks", action="store_true", help="Include the draft board")
    p.set_defaults(func=_cmd_drafts)

    p = sub.add_parser("tv", help="Rotate through leagues (TV mode)")
    p.add_argument("--leagues", default="", help="Comma-separated league keys (default: all leagues)")
    p.add_argument("--cycles", type=int, default=None, help="Stop after N slots (default: run forever)")
    p.set_defaults(func=_cmd_tv)
    return parser


def main(argv: list[str] | None = None) -> int:  # pragma: no cover
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)
    try:
        settings = load_settings(args.config)
        return args.func(settings, args)
    except BoardError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
