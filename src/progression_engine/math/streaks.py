"""Daily and weekly activity streaks and their bonus-XP tables.

A streak is anchored at "now": the daily streak counts back from today's
local midnight and stops at the first day without a log, so a user who has
not logged anything yet today has a daily streak of 0. The weekly streak
does the same with Sunday-based week buckets.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta

from progression_engine.math.time_windows import start_of_day, start_of_week
from progression_engine.models.enums import DAILY_STREAK_BONUSES, WEEKLY_STREAK_BONUSES
from progression_engine.models.log_entry import LogEntry
from progression_engine.models.progress import StreakInfo

logger = logging.getLogger(__name__)


def _activity_timestamps(logs: Iterable[LogEntry], now: datetime) -> list[datetime]:
    """Timestamps of logs at or before *now*; logs without one are skipped."""
    stamps: list[datetime] = []
    for log in logs:
        if log.timestamp is None:
            logger.debug("Log %s has no usable timestamp; excluded from streaks", log.id)
            continue
        if log.timestamp <= now:
            stamps.append(log.timestamp)
    return stamps


def _count_back(buckets: set[datetime], anchor: datetime, step: timedelta) -> int:
    """Count consecutive buckets present, walking back from *anchor* by *step*."""
    streak = 0
    cursor = anchor
    while cursor in buckets:
        streak += 1
        cursor -= step
    return streak


def _daily_from(stamps: list[datetime], now: datetime) -> int:
    days = {start_of_day(ts) for ts in stamps}
    return _count_back(days, start_of_day(now), timedelta(days=1))


def _weekly_from(stamps: list[datetime], now: datetime) -> int:
    weeks = {start_of_week(ts) for ts in stamps}
    return _count_back(weeks, start_of_week(now), timedelta(weeks=1))


def daily_streak(logs: Iterable[LogEntry], now: datetime | None = None) -> int:
    """Consecutive days, ending today, with at least one log."""
    now = now or datetime.now()
    return _daily_from(_activity_timestamps(logs, now), now)


def weekly_streak(logs: Iterable[LogEntry], now: datetime | None = None) -> int:
    """Consecutive Sunday-start weeks, ending this week, with at least one log."""
    now = now or datetime.now()
    return _weekly_from(_activity_timestamps(logs, now), now)


def bonus_for_streak(streak: int, table: Mapping[int, int]) -> int:
    """Bonus for the highest threshold in *table* not exceeding *streak*, else 0."""
    reached = [threshold for threshold in table if threshold <= streak]
    if not reached:
        return 0
    return table[max(reached)]


def streak_bonuses(logs: Iterable[LogEntry], now: datetime | None = None) -> StreakInfo:
    """Compute daily/weekly streaks and their bonuses.

    Args:
        logs: Workout logs (any order). Logs without a timestamp are skipped.
        now: Reference time. Defaults to the current time.

    Returns:
        StreakInfo; all zeros when there are no logs.
    """
    now = now or datetime.now()
    logs = list(logs)
    if not logs:
        return StreakInfo()

    stamps = _activity_timestamps(logs, now)
    daily = _daily_from(stamps, now)
    weekly = _weekly_from(stamps, now)
    return StreakInfo(
        daily_streak=daily,
        weekly_streak=weekly,
        daily_bonus=bonus_for_streak(daily, DAILY_STREAK_BONUSES),
        weekly_bonus=bonus_for_streak(weekly, WEEKLY_STREAK_BONUSES),
    )
