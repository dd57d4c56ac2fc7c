"""League view assembly, text formatting and TV-mode rotation."""

from .collect import build_drafts, build_league_view, build_managers, build_standings
from .formatters import format_display_state, format_json, format_markdown
from .models import DisplayState, DraftsReport, LeagueView, Provenance
from .rotation import Rotation

__all__ = [
    "build_drafts",
    "build_league_view",
    "build_managers",
    "build_standings",
    "format_display_state",
    "format_json",
    "format_markdown",
    "DisplayState",
    "DraftsReport",
    "LeagueView",
    "Provenance",
    "Rotation",
]
