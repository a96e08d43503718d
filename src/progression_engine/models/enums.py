"""Enumerations and tuning constants for the progression engine.

Curve, streak and scoring constants match the values the mobile client
shipped with, so recomputed profiles line up with historical ones.
"""

from enum import Enum, IntEnum, auto


class LogKind(IntEnum):
    """What a log entry records."""

    EXERCISE = auto()
    FOOD = auto()


class PersonalBestWindow(str, Enum):
    """Rolling windows a personal best is tracked over."""

    CURRENT = "current"
    QUARTER = "quarter"
    YEAR = "year"
    ALL_TIME = "allTime"


class PersonalBestType(str, Enum):
    """How a personal-best value was measured."""

    ONE_REP_MAX = "1rm"
    REPS = "reps"
    DURATION = "duration"
    PACE = "pace"


class LaggingType(IntEnum):
    """Lagging-muscle classification, ordered by urgency."""

    NEVER_TRAINED = auto()
    UNDER_TRAINED = auto()
    NEGLECTED = auto()


# ---------------------------------------------------------------------------
# Level curve
# ---------------------------------------------------------------------------
LEVEL_BASE_XP = 1000  # XP for level 2 before scaling/decay
LEVEL_SCALING_FACTOR = 1.15  # Exponential growth per level
LEVEL_SEARCH_CAP = 1000  # Hard upper bound on level lookup

# Time decay: level-up cost rises as the account ages
DECAY_START_DAYS = 30
DECAY_RATE_PER_DAY = 0.01  # +1% per day past the start
MAX_DECAY_MULTIPLIER = 2.0

LEVEL_TITLES: dict[int, str] = {
    1: "Novice Lifter",
    5: "Dedicated Trainee",
    10: "Fitness Enthusiast",
    15: "Strength Seeker",
    20: "Muscle Builder",
    25: "Power Lifter",
    30: "Elite Athlete",
    35: "Fitness Master",
    40: "Strength Legend",
    50: "Goliath Champion",
    75: "Titan of Fitness",
    100: "Immortal Warrior",
}

# ---------------------------------------------------------------------------
# Streak bonuses: streak length threshold -> bonus XP
# ---------------------------------------------------------------------------
DAILY_STREAK_BONUSES: dict[int, int] = {7: 50, 14: 100, 30: 200, 60: 500, 90: 1000}
WEEKLY_STREAK_BONUSES: dict[int, int] = {4: 100, 8: 250, 12: 500}

# ---------------------------------------------------------------------------
# Muscle attribution
# ---------------------------------------------------------------------------
SECONDARY_WEIGHT_PRIMARY_ELSEWHERE = 0.5  # Secondary that is a target of some exercise
SECONDARY_WEIGHT_DEFAULT = 1.0
MUSCLE_DELIMITER = ","

# Period name -> max days since log (inclusive); None = lifetime
MUSCLE_SCORE_PERIODS: dict[str, int | None] = {
    "today": 0,
    "3day": 3,
    "7day": 7,
    "14day": 14,
    "30day": 30,
    "lifetime": None,
}

# Lagging muscles (thresholds in lifetime reps)
LAGGING_UNDER_TRAINED_REPS = 100
LAGGING_NEGLECTED_DAYS = 14
LAGGING_BONUSES: dict[LaggingType, int] = {
    LaggingType.NEVER_TRAINED: 100,
    LaggingType.UNDER_TRAINED: 50,
    LaggingType.NEGLECTED: 25,
}
LAGGING_PRIORITY_BASE: dict[LaggingType, int] = {
    LaggingType.NEVER_TRAINED: 1000,
    LaggingType.UNDER_TRAINED: 500,
    LaggingType.NEGLECTED: 100,
}

# ---------------------------------------------------------------------------
# Personal bests
# ---------------------------------------------------------------------------
# Window span in days; None never expires
PERSONAL_BEST_WINDOW_DAYS: dict[PersonalBestWindow, int | None] = {
    PersonalBestWindow.CURRENT: 30,
    PersonalBestWindow.QUARTER: 90,
    PersonalBestWindow.YEAR: 365,
    PersonalBestWindow.ALL_TIME: None,
}
EPLEY_REPS_DIVISOR = 30.0  # 1RM = weight * (1 + reps / 30)

# XP for beating the live record in each window
PERSONAL_BEST_BONUSES: dict[PersonalBestWindow, int] = {
    PersonalBestWindow.CURRENT: 50,
    PersonalBestWindow.QUARTER: 150,
    PersonalBestWindow.YEAR: 200,
    PersonalBestWindow.ALL_TIME: 300,
}

# ---------------------------------------------------------------------------
# Workout scoring
# ---------------------------------------------------------------------------
SCORING_VERSION = "v4"
WEIGHT_MULTIPLIER = 0.1  # Keeps load from dominating reps
DIMINISHING_RETURNS_START_SET = 4  # 1-indexed set number
DIMINISHING_RETURNS_MULTIPLIER = 0.5
DURATION_POINTS_PER_MINUTE = 10

CATEGORY_MULTIPLIERS: dict[str, float] = {
    "compound": 1.5,
    "cardio": 1.2,
    "core": 1.0,
    "isolation": 1.0,
}
DIFFICULTY_MULTIPLIERS: dict[str, float] = {
    "beginner": 0.8,
    "intermediate": 1.0,
    "advanced": 1.3,
    "expert": 1.5,
}

NOVELTY_FIRST_OF_WEEK_BONUS = 75
NOVELTY_FIRST_OF_DAY_BONUS = 40
