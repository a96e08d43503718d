"""Running XP total bookkeeping.

``total_xp`` only moves by whole log scores: it grows when a newly scored
log is added and shrinks by the recorded score when a log is deleted. It
never drops below zero.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from progression_engine.models.log_entry import LogEntry
from progression_engine.models.profile import ProfileAggregates


def total_xp_from_logs(logs: Iterable[LogEntry]) -> int:
    """Full recount of XP from every log (exercise and food)."""
    return sum(max(log.score, 0) for log in logs)


def add_log_score(profile: ProfileAggregates, log: LogEntry) -> ProfileAggregates:
    return replace(profile, total_xp=profile.total_xp + max(log.score, 0))


def subtract_log_score(profile: ProfileAggregates, log: LogEntry) -> ProfileAggregates:
    return replace(profile, total_xp=max(profile.total_xp - max(log.score, 0), 0))
