"""Tests for total-XP bookkeeping."""

from __future__ import annotations

from progression_engine.math.experience import (
    add_log_score,
    subtract_log_score,
    total_xp_from_logs,
)
from progression_engine.models.profile import ProfileAggregates


class TestTotalXp:
    def test_sums_exercise_and_food(self, history) -> None:
        assert total_xp_from_logs(history) == 120 + 30 + 360 + 140 + 50 + 80 + 20 + 15

    def test_empty(self) -> None:
        assert total_xp_from_logs([]) == 0

    def test_negative_scores_ignored(self, make_log) -> None:
        assert total_xp_from_logs([make_log(score=-40), make_log(score=10)]) == 10


class TestAddSubtract:
    def test_add(self, make_log) -> None:
        profile = add_log_score(ProfileAggregates(total_xp=100), make_log(score=50))
        assert profile.total_xp == 150

    def test_subtract(self, make_log) -> None:
        profile = subtract_log_score(ProfileAggregates(total_xp=100), make_log(score=40))
        assert profile.total_xp == 60

    def test_subtract_clamps_at_zero(self, make_log) -> None:
        profile = subtract_log_score(ProfileAggregates(total_xp=30), make_log(score=40))
        assert profile.total_xp == 0

    def test_other_fields_preserved(self, make_log, now) -> None:
        profile = ProfileAggregates(total_xp=10, muscle_scores={"chest": 5.0}, account_created_at=now)
        updated = add_log_score(profile, make_log(score=5))
        assert updated.muscle_scores == {"chest": 5.0}
        assert updated.account_created_at == now
