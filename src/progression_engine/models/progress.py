"""Derived (never persisted) progress views returned to callers."""

from __future__ import annotations

from dataclasses import dataclass, field

from progression_engine.models.enums import LaggingType
from progression_engine.models.profile import ProfileAggregates
from progression_engine.models.recompute_trace import RecomputeTrace


@dataclass(frozen=True)
class LevelInfo:
    """Where a total XP figure lands on the level curve."""

    level: int
    current_level_xp: int
    next_level_xp: int
    progress: float  # percent through the current level, 0-100
    xp_to_next: int
    level_title: str


@dataclass(frozen=True)
class StreakInfo:
    """Consecutive-activity streaks and the bonus XP they earn."""

    daily_streak: int = 0
    weekly_streak: int = 0
    daily_bonus: int = 0
    weekly_bonus: int = 0

    @property
    def total_bonus(self) -> int:
        return self.daily_bonus + self.weekly_bonus


@dataclass(frozen=True)
class MuscleScoreSummary:
    """Per-muscle attributed XP and its 0..1 balance scale."""

    scores: dict[str, float] = field(default_factory=dict)
    max_score: float = 1.0
    normalized_scores: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class LaggingMuscle:
    """A muscle that is behind, with the bonus XP for training it."""

    muscle: str
    reps: int
    lagging_type: LaggingType
    bonus: int
    days_since_trained: int | None
    priority: int


@dataclass(frozen=True)
class ProgressReport:
    """Everything one engine recompute produces.

    ``aggregates`` is the value to persist; the rest is derived for display.
    """

    aggregates: ProfileAggregates
    level: LevelInfo
    streaks: StreakInfo
    muscles: MuscleScoreSummary
    trace: RecomputeTrace = field(default_factory=RecomputeTrace)
