"""Timestamp normalization and calendar-window helpers.

Log timestamps arrive either as native dates/datetimes or as epoch-seconds
wrappers from the document store. Everything is normalized once, at the
ingestion boundary, to a naive datetime in local time; the rest of the
engine only ever sees that canonical form.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta

from progression_engine.exceptions import InvalidTimestampError

_EPOCH_KEYS = ("seconds", "_seconds")


def to_local_datetime(raw: object) -> datetime:
    """Normalize any supported timestamp representation to naive local time.

    Supported:
        - ``datetime`` (naive is taken as local; aware is converted)
        - ``date``
        - mappings with a ``seconds`` or ``_seconds`` key (store wrapper)
        - objects with a numeric ``.seconds`` attribute
        - bare int/float epoch seconds
        - ISO-8601 strings

    Raises:
        InvalidTimestampError: If *raw* is missing or cannot be interpreted.
    """
    if raw is None:
        raise InvalidTimestampError("Timestamp is missing", raw)
    if isinstance(raw, datetime):
        if raw.tzinfo is not None:
            return raw.astimezone().replace(tzinfo=None)
        return raw
    if isinstance(raw, date):
        return datetime.combine(raw, time.min)
    if isinstance(raw, bool):
        raise InvalidTimestampError(f"Unsupported timestamp: {raw!r}", raw)
    if isinstance(raw, (int, float)):
        return _from_epoch(raw, raw)
    if isinstance(raw, str):
        return _from_iso(raw)
    if isinstance(raw, Mapping):
        for key in _EPOCH_KEYS:
            if key in raw:
                return _from_epoch(raw[key], raw)
        raise InvalidTimestampError(f"Timestamp mapping has no seconds: {raw!r}", raw)
    seconds = getattr(raw, "seconds", None)
    if seconds is not None:
        return _from_epoch(seconds, raw)
    raise InvalidTimestampError(f"Unsupported timestamp: {raw!r}", raw)


def _from_epoch(seconds: object, raw: object) -> datetime:
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        raise InvalidTimestampError(f"Epoch seconds not numeric: {seconds!r}", raw)
    if not math.isfinite(seconds):
        raise InvalidTimestampError(f"Epoch seconds not finite: {seconds!r}", raw)
    try:
        return datetime.fromtimestamp(seconds)
    except (OverflowError, OSError, ValueError) as exc:
        raise InvalidTimestampError(f"Epoch seconds out of range: {seconds!r}", raw) from exc


def _from_iso(text: str) -> datetime:
    value = text.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise InvalidTimestampError(f"Unparseable timestamp string: {text!r}", text) from exc
    return to_local_datetime(parsed)


def try_local_datetime(raw: object) -> datetime | None:
    """Like ``to_local_datetime`` but returns None instead of raising."""
    try:
        return to_local_datetime(raw)
    except InvalidTimestampError:
        return None


def start_of_day(ts: datetime) -> datetime:
    """Local midnight on the day of *ts*."""
    return datetime.combine(ts.date(), time.min)


def start_of_week(ts: datetime) -> datetime:
    """Local midnight on the most recent Sunday on or before *ts*."""
    # weekday(): Monday=0 .. Sunday=6
    days_since_sunday = (ts.weekday() + 1) % 7
    return start_of_day(ts) - timedelta(days=days_since_sunday)


def is_same_day(a: datetime, b: datetime) -> bool:
    return a.date() == b.date()


def is_same_week(a: datetime, b: datetime) -> bool:
    return start_of_week(a) == start_of_week(b)


def days_since(ts: datetime, now: datetime) -> int:
    """Whole elapsed days from *ts* to *now* (floored; negative if *ts* is later)."""
    return math.floor((now - ts) / timedelta(days=1))


def within_days(ts: datetime, days: int | None, now: datetime) -> bool:
    """True if *ts* is no later than *now* and at most *days* days before it.

    ``days=None`` means unbounded (any past timestamp qualifies).
    """
    if ts > now:
        return False
    if days is None:
        return True
    return days_since(ts, now) <= days
