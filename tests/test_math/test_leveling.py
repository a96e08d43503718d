"""Tests for the XP level curve, decay and titles."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from progression_engine.exceptions import CurveConfigurationError
from progression_engine.math.leveling import (
    level_from_xp,
    level_milestone_info,
    level_title,
    round_half_up,
    time_decay_multiplier,
    xp_for_level,
)

NOW = datetime(2024, 6, 12, 18, 0)


class TestRoundHalfUp:
    def test_half_rounds_up(self) -> None:
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_below_half_rounds_down(self) -> None:
        assert round_half_up(1.4999) == 1


class TestTimeDecay:
    def test_no_decay_in_first_month(self) -> None:
        assert time_decay_multiplier(0) == 1.0
        assert time_decay_multiplier(29) == 1.0
        assert time_decay_multiplier(30) == 1.0

    def test_grows_one_percent_per_day(self) -> None:
        assert time_decay_multiplier(31) == pytest.approx(1.01)
        assert time_decay_multiplier(80) == pytest.approx(1.5)

    def test_capped_at_double(self) -> None:
        assert time_decay_multiplier(130) == pytest.approx(2.0)
        assert time_decay_multiplier(5000) == 2.0


class TestXpForLevel:
    def test_level_one_and_below_need_nothing(self) -> None:
        assert xp_for_level(1, now=NOW) == 0
        assert xp_for_level(0, now=NOW) == 0

    def test_new_account_level_two(self) -> None:
        assert xp_for_level(2, account_created_at=NOW, now=NOW) == 1150

    def test_missing_creation_date_treated_as_new(self) -> None:
        assert xp_for_level(2, None, NOW) == 1150

    def test_decay_after_forty_days(self) -> None:
        created = NOW - timedelta(days=40)
        assert xp_for_level(2, created, NOW) == 1265

    def test_decay_fully_applied(self) -> None:
        created = NOW - timedelta(days=130)
        assert xp_for_level(2, created, NOW) == 2300

    def test_overflowing_threshold_raises(self) -> None:
        with pytest.raises(CurveConfigurationError):
            xp_for_level(10_000, now=NOW)

    def test_strictly_increasing(self) -> None:
        thresholds = [xp_for_level(n, now=NOW) for n in range(1, 60)]
        assert all(b > a for a, b in zip(thresholds, thresholds[1:]))


class TestLevelFromXp:
    def test_zero_xp_is_level_one(self) -> None:
        info = level_from_xp(0, now=NOW)
        assert info.level == 1
        assert info.current_level_xp == 0
        assert info.next_level_xp == 1150
        assert info.progress == 0.0
        assert info.xp_to_next == 1150
        assert info.level_title == "Novice Lifter"

    def test_exact_threshold_reaches_level(self) -> None:
        assert level_from_xp(1150, now=NOW).level == 2
        assert level_from_xp(1149, now=NOW).level == 1

    def test_progress_halfway(self) -> None:
        info = level_from_xp(575, now=NOW)
        assert info.progress == 50.0
        assert info.xp_to_next == 575

    @pytest.mark.parametrize("xp", [-50, -1e9, float("nan")])
    def test_invalid_xp_clamped_to_zero(self, xp: float) -> None:
        assert level_from_xp(xp, now=NOW) == level_from_xp(0, now=NOW)

    def test_bracket_invariant(self) -> None:
        for xp in range(0, 40_000, 777):
            info = level_from_xp(xp, now=NOW)
            assert xp_for_level(info.level, now=NOW) <= xp < xp_for_level(info.level + 1, now=NOW)
            assert 0.0 <= info.progress <= 100.0

    def test_monotonic_in_xp(self) -> None:
        levels = [level_from_xp(xp, now=NOW).level for xp in range(0, 60_000, 1000)]
        assert levels == sorted(levels)

    def test_older_account_levels_slower(self) -> None:
        old = level_from_xp(10_000, NOW - timedelta(days=365), NOW)
        new = level_from_xp(10_000, NOW, NOW)
        assert old.level < new.level

    def test_infinite_xp_hits_cap(self) -> None:
        with pytest.raises(CurveConfigurationError) as exc_info:
            level_from_xp(float("inf"), now=NOW)
        assert exc_info.value.level_cap == 1000

    def test_custom_cap(self) -> None:
        with pytest.raises(CurveConfigurationError):
            level_from_xp(1_000_000, now=NOW, level_cap=5)

    def test_cap_beyond_float_range_raises_curve_error(self) -> None:
        with pytest.raises(CurveConfigurationError):
            level_from_xp(float("inf"), now=NOW, level_cap=10_000)


class TestLevelTitles:
    def test_milestone_titles(self) -> None:
        assert level_title(1) == "Novice Lifter"
        assert level_title(5) == "Dedicated Trainee"
        assert level_title(100) == "Immortal Warrior"

    def test_between_milestones_uses_lower(self) -> None:
        assert level_title(7) == "Dedicated Trainee"
        assert level_title(150) == "Immortal Warrior"

    def test_below_first_milestone(self) -> None:
        assert level_title(0) == "Level 0"

    def test_milestone_info(self) -> None:
        info = level_milestone_info(10)
        assert info == {"title": "Fitness Enthusiast", "is_milestone": True, "next_milestone": 15}

    def test_milestone_info_past_last(self) -> None:
        info = level_milestone_info(120)
        assert info["is_milestone"] is False
        assert info["next_milestone"] is None
