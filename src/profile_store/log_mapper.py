"""Pure functions mapping raw store documents to engine models.

No I/O. Takes the camelCase dicts the document store holds and returns
LogEntry, ExerciseMeta and ProfileAggregates values. Timestamps are
normalized here, once; a log whose timestamp cannot be parsed is still
returned (with ``timestamp=None``) so that its score keeps counting
toward XP while every time-window calculation skips it.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from progression_engine.math.time_windows import try_local_datetime
from progression_engine.models.enums import LogKind
from progression_engine.models.exercise import ExerciseMeta
from progression_engine.models.log_entry import LogEntry, SetEntry
from progression_engine.models.profile import ProfileAggregates
from progression_engine.serialization import from_profile_document

logger = logging.getLogger(__name__)


def map_log_entry(doc: dict[str, Any], user_id: str = "") -> Optional[LogEntry]:
    """Map one exercise or food log document to a LogEntry.

    Returns None for documents without an id.
    """
    log_id = doc.get("id")
    if not log_id:
        logger.warning("Skipping log document without id: %r", doc)
        return None

    raw_ts = doc.get("timestamp")
    timestamp = try_local_datetime(raw_ts)
    if timestamp is None:
        logger.warning("Log %s has unparseable timestamp %r", log_id, raw_ts)

    return LogEntry(
        id=str(log_id),
        user_id=str(doc.get("userId") or user_id),
        kind=_extract_kind(doc),
        exercise_id=doc.get("exerciseId") or None,
        timestamp=timestamp,
        sets=_extract_sets(doc.get("sets")),
        duration=_extract_positive(doc.get("duration")),
        distance=_extract_positive(doc.get("distance")),
        score=int(_extract_number(doc.get("score")) or 0),
    )


def map_exercise(doc: dict[str, Any]) -> Optional[ExerciseMeta]:
    """Map one exercise library document to ExerciseMeta.

    Muscle fields may be comma-delimited strings or lists; both are
    normalized by ExerciseMeta itself.
    """
    exercise_id = doc.get("id")
    if not exercise_id:
        logger.warning("Skipping exercise document without id: %r", doc.get("name"))
        return None
    return ExerciseMeta(
        id=str(exercise_id),
        target=doc.get("target") or "",
        secondary_muscles=doc.get("secondaryMuscles") or (),
        equipment=doc.get("equipment") or "",
        difficulty=doc.get("difficulty") or "",
        category=doc.get("category") or "",
        name=doc.get("name") or "",
    )


def map_profile(doc: Optional[dict[str, Any]]) -> ProfileAggregates:
    """Map a profile document to ProfileAggregates (empty defaults when missing)."""
    return from_profile_document(doc)


# ---------------------------------------------------------------------------
# Internal extractors (each handles None input)
# ---------------------------------------------------------------------------


def _extract_kind(doc: dict[str, Any]) -> LogKind:
    if doc.get("type") == "food" or ("foodId" in doc and not doc.get("exerciseId")):
        return LogKind.FOOD
    return LogKind.EXERCISE


def _extract_number(raw: Any) -> Optional[float]:
    """Parse a number that may arrive as a string (form input) or a number."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def _extract_positive(raw: Any) -> Optional[float]:
    value = _extract_number(raw)
    if value is None or value <= 0:
        return None
    return value


def _extract_sets(raw: Any) -> tuple[SetEntry, ...]:
    """Parse the ``sets`` array; blank or negative fields count as zero."""
    if not isinstance(raw, list):
        return ()
    sets = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        weight = max(_extract_number(item.get("weight")) or 0.0, 0.0)
        reps = max(int(_extract_number(item.get("reps")) or 0), 0)
        sets.append(SetEntry(weight=weight, reps=reps))
    return tuple(sets)
