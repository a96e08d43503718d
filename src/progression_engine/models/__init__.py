"""Data models for the progression engine."""

from progression_engine.models.enums import (
    LaggingType,
    LogKind,
    PersonalBestType,
    PersonalBestWindow,
)
from progression_engine.models.exercise import ExerciseLibrary, ExerciseMeta, normalize_muscles
from progression_engine.models.log_entry import LogEntry, SetEntry
from progression_engine.models.profile import (
    ExerciseBests,
    PersonalBestRecord,
    ProfileAggregates,
)
from progression_engine.models.progress import (
    LaggingMuscle,
    LevelInfo,
    MuscleScoreSummary,
    ProgressReport,
    StreakInfo,
)
from progression_engine.models.recompute_trace import Diagnostic, RecomputeTrace, SkipReason

__all__ = [
    "Diagnostic",
    "ExerciseBests",
    "ExerciseLibrary",
    "ExerciseMeta",
    "LaggingMuscle",
    "LaggingType",
    "LevelInfo",
    "LogEntry",
    "LogKind",
    "MuscleScoreSummary",
    "PersonalBestRecord",
    "PersonalBestType",
    "PersonalBestWindow",
    "ProfileAggregates",
    "ProgressReport",
    "RecomputeTrace",
    "SetEntry",
    "SkipReason",
    "StreakInfo",
    "normalize_muscles",
]
