"""Profile aggregates: the engine-owned cache persisted by the profile store.

Every field here except ``total_xp`` can be rebuilt by replaying the full
log history from an empty profile.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from progression_engine.models.enums import PersonalBestType, PersonalBestWindow


@dataclass(frozen=True)
class PersonalBestRecord:
    """Best recorded performance for one exercise in one window."""

    type: PersonalBestType
    value: float
    date: datetime


@dataclass(frozen=True)
class ExerciseBests:
    """Per-window records for a single exercise. ``None`` = no record yet."""

    current: PersonalBestRecord | None = None
    quarter: PersonalBestRecord | None = None
    year: PersonalBestRecord | None = None
    all_time: PersonalBestRecord | None = None

    def get(self, window: PersonalBestWindow) -> PersonalBestRecord | None:
        return getattr(self, _WINDOW_FIELDS[window])

    def with_record(
        self, window: PersonalBestWindow, record: PersonalBestRecord | None
    ) -> ExerciseBests:
        return replace(self, **{_WINDOW_FIELDS[window]: record})

    @property
    def is_empty(self) -> bool:
        return all(self.get(w) is None for w in PersonalBestWindow)


_WINDOW_FIELDS: dict[PersonalBestWindow, str] = {
    PersonalBestWindow.CURRENT: "current",
    PersonalBestWindow.QUARTER: "quarter",
    PersonalBestWindow.YEAR: "year",
    PersonalBestWindow.ALL_TIME: "all_time",
}


@dataclass(frozen=True)
class ProfileAggregates:
    """Immutable profile aggregate passed into and returned from the engine.

    The engine never writes this anywhere; callers persist the returned
    value through a ``ProfileRepository``.
    """

    total_xp: int = 0
    muscle_scores: dict[str, float] = field(default_factory=dict)
    personal_bests: dict[str, ExerciseBests] = field(default_factory=dict)
    account_created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.total_xp < 0:
            object.__setattr__(self, "total_xp", 0)

    def bests_for(self, exercise_id: str) -> ExerciseBests:
        return self.personal_bests.get(exercise_id, ExerciseBests())
