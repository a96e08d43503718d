"""Gamified fitness progression: levels, streaks, muscle balance, personal bests and workout XP."""

from progression_engine.engine import ProgressionEngine
from progression_engine.exceptions import (
    CurveConfigurationError,
    InvalidTimestampError,
    ProgressionError,
)
from progression_engine.math.experience import total_xp_from_logs
from progression_engine.math.leveling import level_from_xp, level_milestone_info, xp_for_level
from progression_engine.math.muscle_scores import (
    aggregate_muscle_scores,
    analyze_lagging_muscles,
    time_based_muscle_scores,
)
from progression_engine.math.personal_bests import rebuild_personal_bests, update_personal_bests
from progression_engine.math.streaks import streak_bonuses
from progression_engine.math.workout_score import recalculate_scores, score_workout

__all__ = [
    "CurveConfigurationError",
    "InvalidTimestampError",
    "ProgressionEngine",
    "ProgressionError",
    "aggregate_muscle_scores",
    "analyze_lagging_muscles",
    "level_from_xp",
    "level_milestone_info",
    "rebuild_personal_bests",
    "recalculate_scores",
    "score_workout",
    "streak_bonuses",
    "time_based_muscle_scores",
    "total_xp_from_logs",
    "update_personal_bests",
    "xp_for_level",
]
