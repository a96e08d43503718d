"""Rolling personal-best records per exercise.

Four windows are tracked: ``current`` (30 days), ``quarter`` (90 days),
``year`` (365 days) and ``allTime``. A window's record is replaced when a
candidate beats it, or when the record itself has aged out of the window;
an aged-out record is dropped even when no new candidate arrives, so a
high but stale value never blocks a lower, current one. The emptied window
takes over the best record still held by a narrower window. Every value
type is higher-is-better; pace is stored as speed. ``allTime`` never
expires and is only replaced by a strictly better value.

Strength candidates use the Epley estimate of the one-rep max:

    1RM = weight * (1 + reps / 30)

Reference:
    Epley (1985). Poundage Chart. Boyd Epley Workout. Lincoln, NE.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

import numpy as np

from progression_engine.math.time_windows import within_days
from progression_engine.models.enums import (
    EPLEY_REPS_DIVISOR,
    PERSONAL_BEST_BONUSES,
    PERSONAL_BEST_WINDOW_DAYS,
    PersonalBestType,
    PersonalBestWindow,
)
from progression_engine.models.exercise import ExerciseLibrary, ExerciseMeta
from progression_engine.models.log_entry import LogEntry, SetEntry
from progression_engine.models.profile import (
    ExerciseBests,
    PersonalBestRecord,
    ProfileAggregates,
)

logger = logging.getLogger(__name__)


def estimate_one_rep_max(weight: float, reps: int) -> float:
    """Epley one-rep-max estimate for a single set."""
    return weight * (1.0 + reps / EPLEY_REPS_DIVISOR)


def _best_set_value(sets: tuple[SetEntry, ...]) -> tuple[PersonalBestType, float] | None:
    if not sets:
        return None
    weights = np.array([s.weight for s in sets], dtype=np.float64)
    reps = np.array([s.reps for s in sets], dtype=np.float64)

    loaded = (weights > 0) & (reps > 0)
    if loaded.any():
        one_rm = weights[loaded] * (1.0 + reps[loaded] / EPLEY_REPS_DIVISOR)
        return PersonalBestType.ONE_REP_MAX, float(one_rm.max())
    if (reps > 0).any():
        return PersonalBestType.REPS, float(reps.max())
    return None


def exercise_value(sample: SetEntry | LogEntry) -> tuple[PersonalBestType, float] | None:
    """Classify a set or a whole workout into a comparable performance value.

    - distance + duration: pace, stored as speed (distance per minute)
    - weight + reps: estimated 1RM of the best set
    - reps only: most reps in a set
    - duration only: duration in minutes

    Returns:
        ``(type, value)`` or None when the sample carries nothing measurable.
    """
    if isinstance(sample, SetEntry):
        return _best_set_value((sample,))

    duration = sample.duration or 0.0
    distance = sample.distance or 0.0
    if duration > 0 and distance > 0:
        return PersonalBestType.PACE, distance / duration

    from_sets = _best_set_value(sample.sets)
    if from_sets is not None:
        return from_sets
    if duration > 0:
        return PersonalBestType.DURATION, float(duration)
    return None


def best_candidate(log: LogEntry) -> SetEntry | None:
    """The workout's single best set, or None when no set carries a value.

    Loaded sets (1RM) outrank bodyweight sets (reps); ties keep the first set.
    """
    best: SetEntry | None = None
    best_key: tuple[bool, float] | None = None
    for entry in log.sets:
        value = exercise_value(entry)
        if value is None:
            continue
        key = (value[0] == PersonalBestType.ONE_REP_MAX, value[1])
        if best_key is None or key > best_key:
            best, best_key = entry, key
    return best


def is_better(value: float, record: PersonalBestRecord) -> bool:
    """True if *value* strictly beats *record*. Every type is higher-is-better."""
    return value > record.value


def is_expired(
    record: PersonalBestRecord, window: PersonalBestWindow, now: datetime
) -> bool:
    """True if *record* has aged out of *window*. ``allTime`` never expires."""
    span = PERSONAL_BEST_WINDOW_DAYS[window]
    if span is None:
        return False
    return not within_days(record.date, span, now)


def _best_narrower_record(
    bests: ExerciseBests, window: PersonalBestWindow, value_type: PersonalBestType
) -> PersonalBestRecord | None:
    """Best *value_type* record held by a window narrower than *window*."""
    narrower = []
    for other in PersonalBestWindow:
        if other == window:
            break
        record = bests.get(other)
        if record is not None and record.type == value_type:
            narrower.append(record)
    if not narrower:
        return None
    return max(narrower, key=lambda record: record.value)


def expire_personal_bests(bests: ExerciseBests, now: datetime) -> ExerciseBests:
    """Drop every window record that has aged out as of *now*.

    Windows nest, so a live record in a narrower window also lies inside
    every wider one. An expired window is refilled with the best such
    record of the same type before it is left empty.
    """
    for window in PersonalBestWindow:
        record = bests.get(window)
        if record is not None and is_expired(record, window, now):
            bests = bests.with_record(
                window, _best_narrower_record(bests, window, record.type)
            )
    return bests


def apply_candidate(
    bests: ExerciseBests,
    value_type: PersonalBestType,
    value: float,
    performed_at: datetime,
    now: datetime,
) -> ExerciseBests:
    """Fold one candidate performance into an exercise's window records.

    The candidate only competes in windows it falls inside. A record of a
    different type is left alone unless it has expired.
    """
    bests = expire_personal_bests(bests, now)
    candidate = PersonalBestRecord(type=value_type, value=value, date=performed_at)

    for window in PersonalBestWindow:
        if not within_days(performed_at, PERSONAL_BEST_WINDOW_DAYS[window], now):
            continue
        record = bests.get(window)
        if record is None or (record.type == value_type and is_better(value, record)):
            bests = bests.with_record(window, candidate)
    return bests


def update_personal_bests(
    exercise_id: str,
    candidate: SetEntry | LogEntry,
    exercise_meta: ExerciseMeta | None,
    profile: ProfileAggregates,
    now: datetime | None = None,
) -> ProfileAggregates:
    """Return *profile* with the exercise's personal bests updated for *candidate*.

    Args:
        exercise_id: Exercise the candidate was performed on.
        candidate: A single set, or a whole workout (its best set is used).
        exercise_meta: Catalog entry; None (unknown exercise) leaves the
            profile untouched.
        profile: Current aggregates. Never mutated.
        now: Reference time for window expiry. Defaults to the current time.

    Returns:
        A new ProfileAggregates, or *profile* itself when nothing changed.
    """
    if exercise_meta is None:
        logger.debug("Unknown exercise %r; personal bests unchanged", exercise_id)
        return profile
    now = now or datetime.now()

    current = profile.bests_for(exercise_id)
    updated = expire_personal_bests(current, now)

    value = exercise_value(candidate)
    if value is not None and value[1] > 0:
        performed_at = now
        if isinstance(candidate, LogEntry) and candidate.timestamp is not None:
            performed_at = candidate.timestamp
        updated = apply_candidate(updated, value[0], value[1], performed_at, now)

    if updated == current:
        return profile

    personal_bests = dict(profile.personal_bests)
    if updated.is_empty:
        personal_bests.pop(exercise_id, None)
    else:
        personal_bests[exercise_id] = updated
    return replace(profile, personal_bests=personal_bests)


def personal_best_bonus(
    value_type: PersonalBestType,
    value: float,
    bests: ExerciseBests,
    now: datetime,
) -> int:
    """Bonus XP for beating each live (unexpired, same-type) window record."""
    bonus = 0
    for window in PersonalBestWindow:
        record = bests.get(window)
        if record is None or record.type != value_type or is_expired(record, window, now):
            continue
        if is_better(value, record):
            bonus += PERSONAL_BEST_BONUSES[window]
    return bonus


def rebuild_personal_bests(
    logs: Iterable[LogEntry],
    library: ExerciseLibrary,
    now: datetime | None = None,
) -> dict[str, ExerciseBests]:
    """Replay the full history from empty state into per-exercise records.

    Logs are folded oldest first; logs with no timestamp, an unknown
    exercise, or nothing measurable are skipped.
    """
    now = now or datetime.now()
    timed = sorted(
        (log for log in logs if log.timestamp is not None),
        key=lambda log: (log.timestamp, log.id),
    )

    rebuilt: dict[str, ExerciseBests] = {}
    for log in timed:
        if library.get(log.exercise_id) is None:
            continue
        value = exercise_value(log)
        if value is None or value[1] <= 0:
            continue
        bests = rebuilt.get(log.exercise_id, ExerciseBests())
        bests = apply_candidate(bests, value[0], value[1], log.timestamp, now)
        if not bests.is_empty:
            rebuilt[log.exercise_id] = bests
    return {exercise_id: rebuilt[exercise_id] for exercise_id in sorted(rebuilt)}
