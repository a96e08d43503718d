"""Recompute trace — which logs each reducer skipped, and why."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, auto


class SkipReason(IntEnum):
    """Why a log was left out of an aggregate."""

    MISSING_TIMESTAMP = auto()
    UNKNOWN_EXERCISE = auto()
    NO_CANDIDATE_VALUE = auto()


@dataclass(frozen=True)
class Diagnostic:
    """One skipped log and the reducer that skipped it."""

    log_id: str
    reason: SkipReason
    component: str
    detail: str = ""


@dataclass(frozen=True)
class RecomputeTrace:
    """Audit trail for one engine recompute."""

    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)
    logs_considered: int = 0

    def skipped(self, reason: SkipReason) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.reason == reason)
