"""One logged workout (or meal) as the engine sees it."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from progression_engine.models.enums import LogKind


@dataclass(frozen=True)
class SetEntry:
    """A single set: load and repetitions. Bodyweight sets carry weight 0."""

    weight: float = 0.0
    reps: int = 0

    @property
    def is_complete(self) -> bool:
        return self.weight > 0 or self.reps > 0


@dataclass(frozen=True)
class LogEntry:
    """Immutable, scored log entry.

    ``timestamp`` is already normalized to a naive local datetime by the
    ingestion layer; ``None`` means the stored value could not be parsed,
    and such logs are excluded from every time-window calculation.
    """

    id: str
    user_id: str = ""
    kind: LogKind = LogKind.EXERCISE
    exercise_id: str | None = None
    timestamp: datetime | None = None
    sets: tuple[SetEntry, ...] = field(default_factory=tuple)
    duration: float | None = None  # minutes
    distance: float | None = None
    score: int = 0

    @property
    def is_exercise(self) -> bool:
        return self.kind == LogKind.EXERCISE and self.exercise_id is not None

    @property
    def total_reps(self) -> int:
        return sum(max(s.reps, 0) for s in self.sets)
