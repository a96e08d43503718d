"""ProgressionEngine — recomputes a user's gamification state from their logs."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from progression_engine.math.experience import add_log_score, subtract_log_score
from progression_engine.math.leveling import level_from_xp
from progression_engine.math.muscle_scores import aggregate_muscle_scores
from progression_engine.math.personal_bests import exercise_value, rebuild_personal_bests
from progression_engine.math.streaks import streak_bonuses
from progression_engine.math.workout_score import score_workout
from progression_engine.models.exercise import ExerciseLibrary
from progression_engine.models.log_entry import LogEntry
from progression_engine.models.profile import ProfileAggregates
from progression_engine.models.progress import ProgressReport
from progression_engine.models.recompute_trace import (
    Diagnostic,
    RecomputeTrace,
    SkipReason,
)

logger = logging.getLogger(__name__)


class ProgressionEngine:
    """Runs every reducer over the full log collection.

    The engine holds no state between calls. Every operation recomputes the
    derived aggregates from the complete history, because muscle
    normalization and window expiry both depend on the whole data set.

    Usage:
        engine = ProgressionEngine()
        report = engine.recompute(profile, logs, library)
        repository.save_profile(user_id, report.aggregates)
    """

    def recompute(
        self,
        profile: ProfileAggregates,
        logs: Iterable[LogEntry],
        library: ExerciseLibrary,
        now: datetime | None = None,
    ) -> ProgressReport:
        """Rebuild muscle scores and personal bests; derive level and streaks.

        Args:
            profile: Current aggregates. ``total_xp`` and
                ``account_created_at`` are carried through unchanged.
            logs: The user's complete log history (exercise and food).
            library: Exercise catalog snapshot.
            now: Reference time. Defaults to the current time.

        Returns:
            A ProgressReport whose ``aggregates`` should be persisted.
        """
        now = now or datetime.now()
        logs = list(logs)
        exercise_logs = [log for log in logs if log.is_exercise]
        trace = self._trace(exercise_logs, library)

        muscles = aggregate_muscle_scores(exercise_logs, library)
        aggregates = replace(
            profile,
            muscle_scores=dict(muscles.scores),
            personal_bests=rebuild_personal_bests(exercise_logs, library, now),
        )

        return ProgressReport(
            aggregates=aggregates,
            level=level_from_xp(aggregates.total_xp, aggregates.account_created_at, now),
            streaks=streak_bonuses(exercise_logs, now),
            muscles=muscles,
            trace=trace,
        )

    def log_workout(
        self,
        profile: ProfileAggregates,
        workout: LogEntry,
        history: Iterable[LogEntry],
        library: ExerciseLibrary,
        now: datetime | None = None,
    ) -> tuple[LogEntry, ProgressReport]:
        """Score a new workout, add it to the XP total, and recompute.

        Returns:
            The scored workout (to persist alongside the report) and the
            recomputed ProgressReport.
        """
        history = [log for log in history if log.id != workout.id]
        meta = library.get(workout.exercise_id)
        score = score_workout(workout, history, meta, profile, library)
        scored = replace(workout, score=score)
        logger.info("Scored workout %s (%s): %d XP", workout.id, workout.exercise_id, score)

        report = self.recompute(add_log_score(profile, scored), [*history, scored], library, now)
        return scored, report

    def delete_log(
        self,
        profile: ProfileAggregates,
        log_id: str,
        logs: Iterable[LogEntry],
        library: ExerciseLibrary,
        now: datetime | None = None,
    ) -> ProgressReport:
        """Remove a log, subtract its recorded score, and recompute.

        An unknown *log_id* leaves the XP total untouched.
        """
        logs = list(logs)
        removed = [log for log in logs if log.id == log_id]
        remaining = [log for log in logs if log.id != log_id]

        if not removed:
            logger.warning("Delete requested for unknown log %s", log_id)
        for log in removed:
            profile = subtract_log_score(profile, log)
        return self.recompute(profile, remaining, library, now)

    @staticmethod
    def _trace(logs: list[LogEntry], library: ExerciseLibrary) -> RecomputeTrace:
        """Record every log a reducer will skip, and report it."""
        diagnostics: list[Diagnostic] = []
        for log in logs:
            if log.timestamp is None:
                logger.warning("Log %s has no usable timestamp; excluded from time windows", log.id)
                diagnostics.append(
                    Diagnostic(
                        log_id=log.id,
                        reason=SkipReason.MISSING_TIMESTAMP,
                        component="time_windows",
                        detail="excluded from streaks, personal bests and periods",
                    )
                )
            if library.get(log.exercise_id) is None:
                logger.warning("Log %s references unknown exercise %r", log.id, log.exercise_id)
                diagnostics.append(
                    Diagnostic(
                        log_id=log.id,
                        reason=SkipReason.UNKNOWN_EXERCISE,
                        component="muscle_scores",
                        detail=f"exercise {log.exercise_id!r} not in library",
                    )
                )
            elif exercise_value(log) is None:
                logger.debug("Log %s carries no measurable performance", log.id)
                diagnostics.append(
                    Diagnostic(
                        log_id=log.id,
                        reason=SkipReason.NO_CANDIDATE_VALUE,
                        component="personal_bests",
                    )
                )
        return RecomputeTrace(diagnostics=tuple(diagnostics), logs_considered=len(logs))
