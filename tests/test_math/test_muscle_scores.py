"""Tests for muscle XP attribution, balance normalization and lagging muscles."""

from __future__ import annotations

import pytest

from progression_engine.math.muscle_scores import (
    aggregate_muscle_scores,
    analyze_lagging_muscles,
    lagging_muscle_bonus,
    muscle_weights,
    time_based_muscle_scores,
)
from progression_engine.models.enums import LaggingType, LogKind
from progression_engine.models.exercise import ExerciseLibrary, ExerciseMeta


class TestMuscleWeights:
    def test_target_full_secondary_split(self, bench_press, library) -> None:
        weights = dict(muscle_weights(bench_press, library))
        assert weights == {"chest": 1.0, "triceps": 0.5, "shoulders": 1.0}

    def test_secondary_that_is_own_target_counted_once(self) -> None:
        meta = ExerciseMeta(id="fly", target="chest", secondary_muscles=["chest", "shoulders"])
        lib = ExerciseLibrary.from_exercises([meta])
        assert muscle_weights(meta, lib) == [("chest", 1.0), ("shoulders", 1.0)]

    def test_library_built_from_mapping(self, bench_press, library) -> None:
        direct = ExerciseLibrary(exercises=dict(library.exercises))
        assert muscle_weights(bench_press, direct) == muscle_weights(bench_press, library)

    def test_multiple_targets_each_full(self) -> None:
        meta = ExerciseMeta(id="clean", target="glutes, hamstrings")
        lib = ExerciseLibrary.from_exercises([meta])
        assert dict(muscle_weights(meta, lib)) == {"glutes": 1.0, "hamstrings": 1.0}


class TestAggregateMuscleScores:
    def test_empty_logs(self, library) -> None:
        summary = aggregate_muscle_scores([], library)
        assert summary.scores == {}
        assert summary.max_score == 1.0
        assert summary.normalized_scores == {}

    def test_single_log_attribution(self, make_log, library) -> None:
        summary = aggregate_muscle_scores([make_log(score=100)], library)
        assert summary.scores == {"chest": 100.0, "shoulders": 100.0, "triceps": 50.0}
        assert summary.max_score == 100.0
        assert summary.normalized_scores == {"chest": 1.0, "shoulders": 1.0, "triceps": 0.5}

    def test_two_logs_same_muscle_normalize_to_one(self, make_log) -> None:
        meta = ExerciseMeta(id="curl", target="biceps")
        lib = ExerciseLibrary.from_exercises([meta])
        logs = [make_log(exercise_id="curl", score=10), make_log(exercise_id="curl", score=20)]
        summary = aggregate_muscle_scores(logs, lib)
        assert summary.scores == {"biceps": 30.0}
        assert summary.normalized_scores == {"biceps": 1.0}

    def test_totals_accumulate_across_exercises(self, make_log, library) -> None:
        logs = [make_log(score=100), make_log(exercise_id="tricep-extension", score=40)]
        summary = aggregate_muscle_scores(logs, library)
        assert summary.scores["triceps"] == 90.0
        assert summary.normalized_scores["triceps"] == pytest.approx(0.9)

    def test_unknown_exercise_skipped(self, make_log, library) -> None:
        summary = aggregate_muscle_scores([make_log(exercise_id="nope", score=500)], library)
        assert summary.scores == {}

    def test_food_logs_ignored(self, make_log, library) -> None:
        summary = aggregate_muscle_scores([make_log(kind=LogKind.FOOD, score=500)], library)
        assert summary.scores == {}

    def test_zero_totals_not_normalized(self, make_log, library) -> None:
        summary = aggregate_muscle_scores([make_log(score=0)], library)
        assert summary.scores["chest"] == 0.0
        assert summary.normalized_scores == {}

    def test_normalized_bounds(self, history, library) -> None:
        summary = aggregate_muscle_scores(history, library)
        assert summary.normalized_scores
        assert all(0 < v <= 1.0 for v in summary.normalized_scores.values())
        assert max(summary.normalized_scores.values()) == 1.0

    def test_order_independent(self, history, library) -> None:
        forward = aggregate_muscle_scores(history, library)
        backward = aggregate_muscle_scores(list(reversed(history)), library)
        assert forward == backward


class TestTimeBasedMuscleScores:
    def test_periods(self, make_log, library, now) -> None:
        logs = [make_log(days_ago=2, score=100), make_log(days_ago=20, score=50)]
        chest = time_based_muscle_scores(logs, library, now)["chest"]
        assert chest == {
            "today": 0.0,
            "3day": 100.0,
            "7day": 100.0,
            "14day": 100.0,
            "30day": 150.0,
            "lifetime": 150.0,
        }

    def test_today_bucket(self, make_log, library, now) -> None:
        scores = time_based_muscle_scores([make_log(days_ago=0.5, score=10)], library, now)
        assert scores["chest"]["today"] == 10.0

    def test_untimed_and_future_logs_excluded(self, make_log, library, now) -> None:
        logs = [make_log(days_ago=None, score=100), make_log(days_ago=-1, score=100)]
        assert time_based_muscle_scores(logs, library, now) == {}

    def test_no_logs(self, library, now) -> None:
        assert time_based_muscle_scores([], library, now) == {}


class TestLaggingMuscles:
    def test_never_trained_ranks_first(self, make_log, library, now) -> None:
        logs = [make_log(days_ago=2, sets=[(60, 10)] * 3)]
        lagging = analyze_lagging_muscles(logs, library, muscles=["chest", "abs"], now=now)
        assert [m.muscle for m in lagging] == ["abs", "chest"]
        abs_, chest = lagging
        assert abs_.lagging_type == LaggingType.NEVER_TRAINED
        assert abs_.bonus == 100
        assert abs_.days_since_trained is None
        assert chest.lagging_type == LaggingType.UNDER_TRAINED
        assert chest.reps == 30
        assert chest.bonus == 50
        assert chest.priority == 502

    def test_neglected_after_two_weeks(self, make_log, library, now) -> None:
        logs = [make_log(days_ago=20, sets=[(60, 20)] * 6)]
        (chest,) = analyze_lagging_muscles(logs, library, muscles=["chest"], now=now)
        assert chest.lagging_type == LaggingType.NEGLECTED
        assert chest.days_since_trained == 20
        assert chest.bonus == 25
        assert chest.priority == 120

    def test_well_trained_not_lagging(self, make_log, library, now) -> None:
        logs = [make_log(days_ago=1, sets=[(60, 20)] * 6)]
        assert analyze_lagging_muscles(logs, library, muscles=["chest"], now=now) == ()

    def test_defaults_to_library_muscles(self, library, now) -> None:
        lagging = analyze_lagging_muscles([], library, now=now)
        assert {m.muscle for m in lagging} == {
            "abs", "calves", "cardiovascular system", "chest", "shoulders", "triceps",
        }
        assert all(m.lagging_type == LaggingType.NEVER_TRAINED for m in lagging)

    def test_bonus_sums_worked_muscles(self, bench_press, library, now) -> None:
        lagging = analyze_lagging_muscles([], library, now=now)
        # chest, triceps and shoulders are all never trained
        assert lagging_muscle_bonus(bench_press, lagging) == 300

    def test_bonus_zero_when_nothing_lagging(self, bench_press) -> None:
        assert lagging_muscle_bonus(bench_press, ()) == 0
