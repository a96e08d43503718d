"""Per-muscle training balance: XP attribution over the muscle taxonomy.

Each scored exercise log credits its full score to every primary (target)
muscle of the exercise. Secondary muscles are credited at half weight when
the muscle is a primary target of *some* exercise in the library, and at
full weight otherwise, so that muscles already well covered by their own
primary movements are not inflated by accessory work.

Totals are then scaled by the largest total (floored at 1) into a 0..1
balance score. All functions are pure folds over the log collection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

import numpy as np
import pandas as pd

from progression_engine.math.time_windows import days_since
from progression_engine.models.enums import (
    LAGGING_BONUSES,
    LAGGING_NEGLECTED_DAYS,
    LAGGING_PRIORITY_BASE,
    LAGGING_UNDER_TRAINED_REPS,
    MUSCLE_SCORE_PERIODS,
    SECONDARY_WEIGHT_DEFAULT,
    SECONDARY_WEIGHT_PRIMARY_ELSEWHERE,
    LaggingType,
)
from progression_engine.models.exercise import ExerciseLibrary, ExerciseMeta
from progression_engine.models.log_entry import LogEntry
from progression_engine.models.progress import LaggingMuscle, MuscleScoreSummary

logger = logging.getLogger(__name__)

_FRAME_COLUMNS = ["muscle", "value", "reps", "days"]


def muscle_weights(meta: ExerciseMeta, library: ExerciseLibrary) -> list[tuple[str, float]]:
    """(muscle, weight) pairs an exercise's score is attributed to.

    A secondary muscle that is also one of the exercise's own targets is
    only credited once, as a target.
    """
    targets = meta.targets
    weights = [(muscle, 1.0) for muscle in targets]
    for muscle in meta.secondary_muscles:
        if muscle in targets:
            continue
        if library.is_primary_anywhere(muscle):
            weights.append((muscle, SECONDARY_WEIGHT_PRIMARY_ELSEWHERE))
        else:
            weights.append((muscle, SECONDARY_WEIGHT_DEFAULT))
    return weights


def aggregate_muscle_scores(
    logs: Iterable[LogEntry], library: ExerciseLibrary
) -> MuscleScoreSummary:
    """Fold scored exercise logs into per-muscle totals and normalized scores.

    Logs whose exercise id is missing from *library* are skipped.

    Args:
        logs: Exercise logs carrying their recorded score.
        library: Exercise catalog snapshot.

    Returns:
        MuscleScoreSummary with raw totals, ``max_score = max(totals, 1)``
        and ``normalized_scores`` for every muscle with a nonzero total.
    """
    totals: dict[str, float] = {}
    for log in logs:
        meta = library.get(log.exercise_id)
        if meta is None:
            logger.debug("Skipping log %s: unknown exercise %r", log.id, log.exercise_id)
            continue
        score = max(log.score, 0)
        for muscle, weight in muscle_weights(meta, library):
            totals[muscle] = totals.get(muscle, 0.0) + score * weight

    scores = {muscle: totals[muscle] for muscle in sorted(totals)}
    max_score = max([*scores.values(), 1.0])
    normalized = {
        muscle: total / max_score for muscle, total in scores.items() if total != 0
    }
    return MuscleScoreSummary(scores=scores, max_score=max_score, normalized_scores=normalized)


def _attribution_frame(
    logs: Iterable[LogEntry], library: ExerciseLibrary, now: datetime
) -> pd.DataFrame:
    """One row per (log, muscle) credit for logs at or before *now*."""
    rows: list[tuple[str, float, int, int]] = []
    for log in logs:
        meta = library.get(log.exercise_id)
        if meta is None or log.timestamp is None:
            continue
        days = days_since(log.timestamp, now)
        if days < 0:
            continue
        score = max(log.score, 0)
        for muscle, weight in muscle_weights(meta, library):
            rows.append((muscle, score * weight, log.total_reps, days))
    return pd.DataFrame(rows, columns=_FRAME_COLUMNS)


def time_based_muscle_scores(
    logs: Iterable[LogEntry],
    library: ExerciseLibrary,
    now: datetime | None = None,
) -> dict[str, dict[str, float]]:
    """Attributed score per muscle over rolling periods.

    Periods are ``today``, ``3day``, ``7day``, ``14day``, ``30day`` and
    ``lifetime``; a log falls in a period when the whole days elapsed since
    it are at most the period length.

    Returns:
        ``{muscle: {period: score}}``, muscles sorted by name.
    """
    now = now or datetime.now()
    frame = _attribution_frame(logs, library, now)
    if frame.empty:
        return {}

    columns: dict[str, pd.Series] = {}
    for period, max_days in MUSCLE_SCORE_PERIODS.items():
        window = frame if max_days is None else frame[frame["days"] <= max_days]
        columns[period] = window.groupby("muscle")["value"].sum()

    table = pd.DataFrame(columns).fillna(0.0).sort_index()
    return {
        muscle: {period: float(row[period]) for period in MUSCLE_SCORE_PERIODS}
        for muscle, row in table.iterrows()
    }


def _library_muscles(library: ExerciseLibrary) -> list[str]:
    muscles: dict[str, None] = {}
    for meta in library:
        for muscle in meta.all_muscles:
            muscles.setdefault(muscle, None)
    return list(muscles)


def analyze_lagging_muscles(
    logs: Iterable[LogEntry],
    library: ExerciseLibrary,
    muscles: Iterable[str] | None = None,
    now: datetime | None = None,
) -> tuple[LaggingMuscle, ...]:
    """Find muscles that are never trained, under-trained, or neglected.

    Reps (not XP) are the training measure here: every muscle an exercise
    works is credited with the log's total reps.

    Args:
        logs: Workout history.
        library: Exercise catalog used to resolve each log's muscles.
        muscles: Muscles to assess. Defaults to every muscle in *library*.
        now: Reference time. Defaults to the current time.

    Returns:
        Lagging muscles, most urgent first.
    """
    now = now or datetime.now()
    candidates = list(dict.fromkeys(muscles)) if muscles is not None else _library_muscles(library)
    frame = _attribution_frame(logs, library, now)

    lifetime_reps = frame.groupby("muscle")["reps"].sum()
    last_trained = frame.groupby("muscle")["days"].min()

    lagging: list[LaggingMuscle] = []
    for muscle in candidates:
        reps = int(lifetime_reps.get(muscle, 0))
        days = last_trained.get(muscle)
        days_since_trained = None if days is None or np.isnan(days) else int(days)

        if reps == 0:
            kind = LaggingType.NEVER_TRAINED
        elif reps < LAGGING_UNDER_TRAINED_REPS:
            kind = LaggingType.UNDER_TRAINED
        elif days_since_trained is None or days_since_trained > LAGGING_NEGLECTED_DAYS:
            kind = LaggingType.NEGLECTED
        else:
            continue

        lagging.append(
            LaggingMuscle(
                muscle=muscle,
                reps=reps,
                lagging_type=kind,
                bonus=LAGGING_BONUSES[kind],
                days_since_trained=days_since_trained,
                priority=LAGGING_PRIORITY_BASE[kind] + (days_since_trained or 0),
            )
        )

    return tuple(sorted(lagging, key=lambda m: (-m.priority, m.muscle)))


def lagging_muscle_bonus(meta: ExerciseMeta, lagging: Iterable[LaggingMuscle]) -> int:
    """Bonus XP for an exercise that works one or more lagging muscles."""
    worked = set(meta.all_muscles)
    return sum(m.bonus for m in lagging if m.muscle in worked)
