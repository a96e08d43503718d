"""XP awarded for a single logged workout.

score = volume * category_multiplier * difficulty_multiplier
        + personal_best_bonus + novelty_bonus + streak_bonus + lagging_bonus

Volume is ``weight * 0.1 + reps`` per set, with sets from the fourth
onwards at half value, plus ten points per minute of duration. The
function is pure: the workout's own timestamp stands in for "now", and
only history logged strictly before the workout is considered, so a
history can be re-scored reproducibly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace

from progression_engine.math.leveling import round_half_up
from progression_engine.math.muscle_scores import (
    analyze_lagging_muscles,
    lagging_muscle_bonus,
)
from progression_engine.math.personal_bests import (
    exercise_value,
    personal_best_bonus,
    update_personal_bests,
)
from progression_engine.math.streaks import streak_bonuses
from progression_engine.math.time_windows import is_same_day, is_same_week
from progression_engine.models.enums import (
    CATEGORY_MULTIPLIERS,
    DIFFICULTY_MULTIPLIERS,
    DIMINISHING_RETURNS_MULTIPLIER,
    DIMINISHING_RETURNS_START_SET,
    DURATION_POINTS_PER_MINUTE,
    NOVELTY_FIRST_OF_DAY_BONUS,
    NOVELTY_FIRST_OF_WEEK_BONUS,
    SCORING_VERSION,
    WEIGHT_MULTIPLIER,
    LogKind,
)
from progression_engine.models.exercise import ExerciseLibrary, ExerciseMeta
from progression_engine.models.log_entry import LogEntry
from progression_engine.models.profile import ProfileAggregates

logger = logging.getLogger(__name__)


def volume_points(workout: LogEntry) -> float:
    """Raw work done: weighted set volume plus duration points."""
    points = 0.0
    for set_number, s in enumerate(workout.sets, start=1):
        set_points = max(s.weight, 0.0) * WEIGHT_MULTIPLIER + max(s.reps, 0)
        if set_number >= DIMINISHING_RETURNS_START_SET:
            set_points *= DIMINISHING_RETURNS_MULTIPLIER
        points += set_points
    if workout.duration and workout.duration > 0:
        points += workout.duration * DURATION_POINTS_PER_MINUTE
    return points


def effort_multiplier(meta: ExerciseMeta | None) -> float:
    """Category x difficulty multiplier; unknown values count as 1.0."""
    if meta is None:
        return 1.0
    category = CATEGORY_MULTIPLIERS.get(meta.category, 1.0)
    difficulty = DIFFICULTY_MULTIPLIERS.get(meta.difficulty, 1.0)
    return category * difficulty


def _make_resolver(
    meta: ExerciseMeta, library: ExerciseLibrary | None
) -> Callable[[LogEntry], ExerciseMeta | None]:
    def resolve(log: LogEntry) -> ExerciseMeta | None:
        if library is not None:
            return library.get(log.exercise_id)
        return meta if log.exercise_id == meta.id else None

    return resolve


def novelty_bonus(
    workout: LogEntry,
    prior: list[LogEntry],
    meta: ExerciseMeta,
    library: ExerciseLibrary | None = None,
) -> int:
    """Bonus for the first time this week (or today) a target muscle is trained."""
    if workout.timestamp is None or not meta.targets:
        return 0
    resolve = _make_resolver(meta, library)
    targets = set(meta.targets)

    worked_this_week = False
    worked_today = False
    for log in prior:
        if not is_same_week(log.timestamp, workout.timestamp):
            continue
        other = resolve(log)
        if other is None or not targets.intersection(other.targets):
            continue
        worked_this_week = True
        if is_same_day(log.timestamp, workout.timestamp):
            worked_today = True
            break

    if not worked_this_week:
        return NOVELTY_FIRST_OF_WEEK_BONUS
    if not worked_today:
        return NOVELTY_FIRST_OF_DAY_BONUS
    return 0


def score_workout(
    workout: LogEntry,
    history: Iterable[LogEntry],
    exercise_meta: ExerciseMeta | None,
    profile: ProfileAggregates | None = None,
    library: ExerciseLibrary | None = None,
) -> int:
    """Compute the XP value of one workout.

    Args:
        workout: The workout being scored (its ``score`` field is ignored).
        history: The user's workout history; entries at or after the
            workout's timestamp, and the workout itself, are ignored.
        exercise_meta: Catalog entry for the workout's exercise, or None.
        profile: Current aggregates. Enables the personal-best and
            lagging-muscle bonuses.
        library: Full catalog, used to resolve the muscles of history
            logs. Without it only logs of the same exercise are resolved.

    Returns:
        A non-negative integer XP score. Workouts with no measurable work
        score 0.
    """
    volume = volume_points(workout)
    if volume <= 0:
        return 0

    score = volume * effort_multiplier(exercise_meta)
    now = workout.timestamp
    if now is None or exercise_meta is None:
        return max(0, round_half_up(score))

    prior = [
        log
        for log in history
        if log.is_exercise
        and log.id != workout.id
        and log.timestamp is not None
        and log.timestamp < now
    ]

    if profile is not None:
        value = exercise_value(workout)
        if value is not None:
            score += personal_best_bonus(
                value[0], value[1], profile.bests_for(exercise_meta.id), now
            )

    score += novelty_bonus(workout, prior, exercise_meta, library)

    if not any(is_same_day(log.timestamp, now) for log in prior):
        score += streak_bonuses([*prior, workout], now=now).total_bonus

    if profile is not None:
        lagging = analyze_lagging_muscles(
            prior,
            library or ExerciseLibrary.from_exercises([exercise_meta]),
            muscles=exercise_meta.all_muscles,
            now=now,
        )
        score += lagging_muscle_bonus(exercise_meta, lagging)

    return max(0, round_half_up(score))


def recalculate_scores(
    logs: Iterable[LogEntry], library: ExerciseLibrary
) -> list[LogEntry]:
    """Re-score an exercise history after a scoring change.

    Logs are scored oldest first, each against the logs before it and the
    personal bests accumulated so far. Food logs and logs without a
    timestamp keep their stored score. Input order is preserved.
    """
    logs = list(logs)
    logger.info("Recalculating %d scores with scoring %s", len(logs), SCORING_VERSION)

    timed = sorted(
        (log for log in logs if log.kind == LogKind.EXERCISE and log.timestamp is not None),
        key=lambda log: (log.timestamp, log.id),
    )

    profile = ProfileAggregates()
    rescored: dict[str, int] = {}
    prior: list[LogEntry] = []
    for log in timed:
        meta = library.get(log.exercise_id)
        score = score_workout(log, prior, meta, profile, library)
        rescored[log.id] = score
        prior.append(replace(log, score=score))
        if meta is not None:
            profile = update_personal_bests(meta.id, log, meta, profile, now=log.timestamp)

    return [replace(log, score=rescored[log.id]) if log.id in rescored else log for log in logs]
