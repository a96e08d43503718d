"""Shared test fixtures: a fixed clock, a small exercise library, log factories."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

import pytest

from progression_engine.models.enums import LogKind
from progression_engine.models.exercise import ExerciseLibrary, ExerciseMeta
from progression_engine.models.log_entry import LogEntry, SetEntry
from progression_engine.models.profile import ProfileAggregates

# Wednesday; the Sunday-based week started 2024-06-09.
NOW = datetime(2024, 6, 12, 18, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def bench_press() -> ExerciseMeta:
    """Compound chest press; triceps are a target elsewhere, shoulders are not."""
    return ExerciseMeta(
        id="bench-press",
        name="Bench Press",
        target="chest",
        secondary_muscles="triceps, shoulders",
        equipment="barbell",
        difficulty="intermediate",
        category="compound",
    )


@pytest.fixture
def library(bench_press: ExerciseMeta) -> ExerciseLibrary:
    return ExerciseLibrary.from_exercises([
        bench_press,
        ExerciseMeta(
            id="tricep-extension",
            name="Tricep Extension",
            target="triceps",
            equipment="dumbbell",
            difficulty="beginner",
            category="isolation",
        ),
        ExerciseMeta(
            id="plank",
            name="Plank",
            target="abs",
            equipment="body weight",
            difficulty="beginner",
            category="core",
        ),
        ExerciseMeta(
            id="running",
            name="Running",
            target="cardiovascular system",
            secondary_muscles=["calves"],
            category="cardio",
        ),
    ])


@pytest.fixture
def make_log() -> Callable[..., LogEntry]:
    """Factory: ``make_log("a", "bench-press", days_ago=1, sets=[(100, 10)])``."""
    counter = iter(range(10_000))

    def _make(
        log_id: str | None = None,
        exercise_id: str | None = "bench-press",
        days_ago: float | None = 0,
        sets: list[tuple[float, int]] | None = None,
        score: int = 0,
        duration: float | None = None,
        distance: float | None = None,
        kind: LogKind = LogKind.EXERCISE,
    ) -> LogEntry:
        return LogEntry(
            id=log_id or f"log-{next(counter)}",
            user_id="user-1",
            kind=kind,
            exercise_id=exercise_id if kind == LogKind.EXERCISE else None,
            timestamp=None if days_ago is None else NOW - timedelta(days=days_ago),
            sets=tuple(SetEntry(weight=w, reps=r) for w, r in (sets or [])),
            duration=duration,
            distance=distance,
            score=score,
        )

    return _make


@pytest.fixture
def history(make_log: Callable[..., LogEntry]) -> list[LogEntry]:
    """A week of mixed training, one untimed log, one unknown exercise, one meal."""
    return [
        make_log("bench-1", "bench-press", days_ago=6, sets=[(80, 8), (80, 8), (80, 6)], score=120),
        make_log("plank-1", "plank", days_ago=5, duration=3, score=30),
        make_log("run-1", "running", days_ago=3, duration=30, distance=5, score=360),
        make_log("bench-2", "bench-press", days_ago=1, sets=[(85, 8), (85, 7)], score=140),
        make_log("tri-1", "tricep-extension", days_ago=0.25, sets=[(20, 12), (20, 12)], score=50),
        make_log("bench-untimed", "bench-press", days_ago=None, sets=[(100, 5)], score=80),
        make_log("mystery-1", "unknown-exercise", days_ago=2, sets=[(10, 10)], score=20),
        make_log("meal-1", kind=LogKind.FOOD, days_ago=0.5, score=15),
    ]


@pytest.fixture
def empty_profile() -> ProfileAggregates:
    return ProfileAggregates()
