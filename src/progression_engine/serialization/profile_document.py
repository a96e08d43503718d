"""Profile document codec for ProfileAggregates.

Converts ProfileAggregates to and from the camelCase document shape the
profile store keeps per user:

    {
        "totalXP": 12450,
        "muscleScores": {"chest": 830.5, ...},
        "personalBests": {
            "bench-press": {
                "current": {"type": "1rm", "value": 96.0, "date": "2024-03-01T18:30:00"},
                "quarter": ..., "year": ..., "allTime": ...
            }
        },
        "accountCreatedAt": "2023-11-02T09:00:00"
    }

All functions are pure (no I/O).
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from progression_engine.math.time_windows import try_local_datetime
from progression_engine.models.enums import PersonalBestType, PersonalBestWindow
from progression_engine.models.profile import (
    ExerciseBests,
    PersonalBestRecord,
    ProfileAggregates,
)

logger = logging.getLogger(__name__)


def to_profile_document(profile: ProfileAggregates) -> dict:
    """Convert ProfileAggregates to a JSON-compatible store document."""
    return {
        "totalXP": profile.total_xp,
        "muscleScores": {muscle: float(score) for muscle, score in profile.muscle_scores.items()},
        "personalBests": {
            exercise_id: _bests_to_dict(bests)
            for exercise_id, bests in profile.personal_bests.items()
        },
        "accountCreatedAt": (
            profile.account_created_at.isoformat() if profile.account_created_at else None
        ),
    }


def to_profile_document_string(profile: ProfileAggregates, indent: int = 2) -> str:
    """Convert ProfileAggregates to a JSON string."""
    return json.dumps(to_profile_document(profile), indent=indent, sort_keys=True)


def from_profile_document(doc: dict[str, Any] | None) -> ProfileAggregates:
    """Build ProfileAggregates from a store document.

    Missing or malformed fields fall back to the empty-profile defaults;
    malformed personal-best records are dropped with a warning.
    """
    if not doc:
        return ProfileAggregates()

    return ProfileAggregates(
        total_xp=_as_xp(doc.get("totalXP")),
        muscle_scores=_as_muscle_scores(doc.get("muscleScores")),
        personal_bests=_as_personal_bests(doc.get("personalBests")),
        account_created_at=try_local_datetime(doc.get("accountCreatedAt")),
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _bests_to_dict(bests: ExerciseBests) -> dict:
    result = {}
    for window in PersonalBestWindow:
        record = bests.get(window)
        if record is not None:
            result[window.value] = {
                "type": record.type.value,
                "value": record.value,
                "date": record.date.isoformat(),
            }
    return result


def _as_xp(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not math.isfinite(raw):
        return 0
    return max(int(raw), 0)


def _as_muscle_scores(raw: Any) -> dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    scores = {}
    for muscle, value in raw.items():
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            scores[str(muscle).strip().lower()] = float(value)
    return scores


def _as_personal_bests(raw: Any) -> dict[str, ExerciseBests]:
    if not isinstance(raw, dict):
        return {}
    result = {}
    for exercise_id, windows in raw.items():
        if not isinstance(windows, dict):
            continue
        bests = ExerciseBests()
        for window in PersonalBestWindow:
            record = _as_record(windows.get(window.value), exercise_id, window)
            if record is not None:
                bests = bests.with_record(window, record)
        if not bests.is_empty:
            result[exercise_id] = bests
    return result


def _as_record(
    raw: Any, exercise_id: str, window: PersonalBestWindow
) -> PersonalBestRecord | None:
    """Parse one window record, or None if it is absent or malformed."""
    if not raw:
        return None
    try:
        value_type = PersonalBestType(raw.get("type"))
        value = float(raw["value"])
    except (AttributeError, KeyError, TypeError, ValueError):
        logger.warning("Dropping malformed %s record for %s: %r", window.value, exercise_id, raw)
        return None

    performed_at = try_local_datetime(raw.get("date"))
    if performed_at is None:
        logger.warning("Dropping %s record for %s with bad date: %r", window.value, exercise_id, raw)
        return None
    return PersonalBestRecord(type=value_type, value=value, date=performed_at)
