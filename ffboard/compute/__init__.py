from . import core, drafts, guillotine, matchups, probability, standings, weeks

group_rows = core.group_rows
effective_points = core.effective_points
derive_standings = standings.derive_standings
derive_matchups = matchups.derive_matchups
project_points = matchups.project_points
derive_guillotine = guillotine.derive_guillotine
field_rank_matchups = guillotine.field_rank_matchups
ProbabilityModel = probability.ProbabilityModel
win_probability = probability.win_probability
provisional_week = weeks.provisional_week
infer_current_week = weeks.infer_current_week
derive_managers = drafts.derive_managers
derive_drafts = drafts.derive_drafts
derive_draft_board = drafts.derive_draft_board

__all__ = [
    "group_rows",
    "effective_points",
    "derive_standings",
    "derive_matchups",
    "project_points",
    "derive_guillotine",
    "field_rank_matchups",
    "ProbabilityModel",
    "win_probability",
    "provisional_week",
    "infer_current_week",
    "derive_managers",
    "derive_drafts",
    "derive_draft_board",
]
