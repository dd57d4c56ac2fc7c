"""Text renderings of league views for the command line and TV mode."""

from __future__ import annotations

import datetime
import json
from typing import Any, Iterable, Sequence

from ffboard.compute.guillotine import rows_by_zone
from ffboard.compute.models import StandingsRow, TeamView

from .models import DisplayState, LeagueView

ZONE_TITLES = {
    "chopped": "Chopped Zone",
    "danger": "Danger Zone",
    "safe": "Safety Zone",
    "super_safe": "Super Safety Zone",
}


def _table(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> list[str]:
    esc = lambda v: str(v).replace("|", "\\|")  # noqa: E731
    out = ["| " + " | ".join(headers) + " |", "| " + " | ".join(["---"] * len(headers)) + " |"]
    for r in rows:
        out.append("| " + " | ".join(esc(c) for c in r) + " |")
    return out


def _score(team: TeamView) -> str:
    if team.points is not None:
        return f"{team.points:.1f}"
    if team.projection > 0:
        return f"{team.projection:.1f}"
    return "—"


def _badge(team: TeamView) -> str:
    if team.win_probability is not None:
        return f"WIN {round(team.win_probability * 100)}%"
    return "Pre-game" if team.is_pre_game else "Projected"


def relative_time(when: datetime.datetime, now: datetime.datetime | None = None) -> str:
    now = now or datetime.datetime.now(datetime.timezone.utc)
    mins = int((now - when).total_seconds() // 60)
    if mins < 1:
        return "just now"
    if mins < 60:
        return f"{mins}m ago"
    hours = mins // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def standings_lines(rows: Sequence[StandingsRow]) -> list[str]:
    return _table(
        ["rank", "team", "owner", "record", "win_pct", "pf", "pa", "diff"],
        [
            [
                i + 1,
                r.team_name,
                r.owner_name,
                f"{r.wins}-{r.losses}-{r.ties}",
                f"{r.win_pct:.4f}",
                f"{r.points_for:.2f}",
                f"{r.points_against:.2f}",
                f"{r.point_diff:+.2f}",
            ]
            for i, r in enumerate(rows)
        ],
    )


def format_markdown(view: LeagueView, now: datetime.datetime | None = None) -> str:
    lines = [f"# {view.league_name} — Week {view.week}", ""]
    if view.site_title:
        season = f", {view.season} season" if view.season else ""
        lines.extend([f"_{view.site_title}{season}_", ""])
    if view.guillotine:
        for zone, rows in rows_by_zone(view.guillotine).items():
            lines.append(f"## {ZONE_TITLES.get(zone, zone)}")
            lines.extend(
                _table(
                    ["rank", "owner", "points", "safety"],
                    [
                        [
                            f"#{r.rank}",
                            r.team.owner_name + (" (pre-game)" if r.team.is_pre_game else ""),
                            _score(r.team),
                            f"{r.safety_pct:.0f}%",
                        ]
                        for r in rows
                    ],
                )
            )
            lines.append("")
    elif view.matchups:
        lines.append("## Matchups")
        rows = []
        for m in view.matchups:
            a, b = m.teams
            rows.append([m.matchup_id, f"{a.owner_name} {a.seed}", _score(a), _badge(a),
                         f"{b.owner_name} {b.seed}", _score(b), _badge(b)])
        lines.extend(_table(["matchup", "team_a", "score_a", "a", "team_b", "score_b", "b"], rows))
        lines.append("")
    else:
        lines.extend(["No matchup data available for this week.", ""])

    if view.standings:
        lines.append("## Standings")
        lines.extend(standings_lines(view.standings))
        lines.append("")
    if view.provenance is not None:
        p = view.provenance
        lines.append(
            f"Data: {p.source} • Last fetch: {relative_time(p.fetched_at, now)} • "
            f"Hash: {p.short_hash} • Source: {view.source_path}"
        )
    return "\n".join(lines).rstrip() + "\n"


def format_json(view: LeagueView, pretty: bool = True) -> str:
    if pretty:
        return json.dumps(view.to_json_payload(), indent=2, sort_keys=True, ensure_ascii=False)
    return json.dumps(view.to_json_payload(), separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def format_display_state(state: DisplayState) -> str:
    if state.view is not None and state.error is None:
        return format_markdown(state.view)
    return (
        f"# {state.league_name}\n\nConnection Issue\n\n"
        f"{state.error or 'Something went wrong. The display will automatically retry.'}\n"
        f"Retry attempt: {state.retry_count}/{state.max_retries}\n"
    )
