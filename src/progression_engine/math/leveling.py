"""Level curve: exponential XP thresholds with an account-age decay multiplier.

XP needed to *reach* level n (n >= 2):

    threshold(n) = round(LEVEL_BASE_XP * LEVEL_SCALING_FACTOR ** (n - 1) * decay)

where ``decay`` is 1.0 for the first DECAY_START_DAYS days of an account,
then grows by DECAY_RATE_PER_DAY per day up to MAX_DECAY_MULTIPLIER. Older
accounts therefore level up more slowly for the same XP.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime

from progression_engine.exceptions import CurveConfigurationError
from progression_engine.math.time_windows import days_since
from progression_engine.models.enums import (
    DECAY_RATE_PER_DAY,
    DECAY_START_DAYS,
    LEVEL_BASE_XP,
    LEVEL_SCALING_FACTOR,
    LEVEL_SEARCH_CAP,
    LEVEL_TITLES,
    MAX_DECAY_MULTIPLIER,
)
from progression_engine.models.progress import LevelInfo

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (matches the client's Math.round)."""
    return int(math.floor(value + 0.5))


def time_decay_multiplier(days_since_creation: int) -> float:
    """Multiplier applied to level thresholds for an account of the given age."""
    if days_since_creation < DECAY_START_DAYS:
        return 1.0
    decay_days = days_since_creation - DECAY_START_DAYS
    return min(1.0 + decay_days * DECAY_RATE_PER_DAY, MAX_DECAY_MULTIPLIER)


def _account_age_days(account_created_at: datetime | None, now: datetime) -> int:
    if account_created_at is None:
        return 0
    return max(days_since(account_created_at, now), 0)


def xp_for_level(
    level: int,
    account_created_at: datetime | None = None,
    now: datetime | None = None,
) -> int:
    """Total XP required to reach *level*.

    Args:
        level: Target level (levels <= 1 need no XP).
        account_created_at: Account creation time; None is treated as "just created".
        now: Reference time for the account age. Defaults to the current time.

    Returns:
        The XP threshold as an integer.

    Raises:
        CurveConfigurationError: If the threshold overflows a float.
    """
    if level <= 1:
        return 0
    now = now or datetime.now()
    try:
        base = LEVEL_BASE_XP * math.pow(LEVEL_SCALING_FACTOR, level - 1)
    except OverflowError as exc:
        logger.error("XP threshold for level %d overflows", level)
        raise CurveConfigurationError(f"XP threshold for level {level} overflows") from exc
    decay = time_decay_multiplier(_account_age_days(account_created_at, now))
    return round_half_up(base * decay)


def level_title(level: int) -> str:
    """Title of the highest milestone at or below *level*."""
    eligible = [milestone for milestone in LEVEL_TITLES if milestone <= level]
    if not eligible:
        return f"Level {level}"
    return LEVEL_TITLES[max(eligible)]


def level_milestone_info(level: int) -> dict[str, object]:
    """Display info for a level: its title, whether it is a milestone, and the next one."""
    upcoming = sorted(m for m in LEVEL_TITLES if m > level)
    return {
        "title": level_title(level),
        "is_milestone": level in LEVEL_TITLES,
        "next_milestone": upcoming[0] if upcoming else None,
    }


def level_from_xp(
    total_xp: float,
    account_created_at: datetime | None = None,
    now: datetime | None = None,
    level_cap: int = LEVEL_SEARCH_CAP,
) -> LevelInfo:
    """Place *total_xp* on the level curve.

    Finds the unique level with ``xp_for_level(level) <= total_xp <
    xp_for_level(level + 1)`` by walking up from level 1. The walk is
    bounded by *level_cap*.

    Args:
        total_xp: Accumulated XP. Negative or NaN values are clamped to 0.
        account_created_at: Account creation time (drives the decay multiplier).
        now: Reference time. Defaults to the current time.
        level_cap: Highest level the search may reach.

    Returns:
        LevelInfo for the reached level.

    Raises:
        CurveConfigurationError: If *total_xp* would place the user
            beyond *level_cap*, which only happens when the curve is broken
            or the input is non-finite.
    """
    if not total_xp > 0:
        total_xp = 0
    now = now or datetime.now()

    level = 1
    next_xp = xp_for_level(2, account_created_at, now)
    while next_xp <= total_xp:
        level += 1
        if level > level_cap:
            logger.error("Level search reached cap %d for total_xp=%s", level_cap, total_xp)
            raise CurveConfigurationError(
                f"Level search exceeded cap of {level_cap} (total_xp={total_xp})",
                level_cap=level_cap,
            )
        next_xp = xp_for_level(level + 1, account_created_at, now)

    current_xp = xp_for_level(level, account_created_at, now)
    span = next_xp - current_xp
    progress = 100.0 * (total_xp - current_xp) / span if span > 0 else 0.0

    return LevelInfo(
        level=level,
        current_level_xp=current_xp,
        next_level_xp=next_xp,
        progress=round(progress, 2),
        xp_to_next=math.ceil(next_xp - total_xp),
        level_title=level_title(level),
    )
