"""Read-only exercise catalog entries consumed by the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from progression_engine.models.enums import MUSCLE_DELIMITER


def normalize_muscles(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Normalize a duck-typed muscle field into a tuple of muscle names.

    Accepts ``None``, a delimited string ("biceps, forearms") or any
    iterable of strings that may themselves be delimited. Names are
    stripped and lower-cased; duplicates are dropped, first-seen order kept.
    """
    if value is None:
        return ()
    parts = [value] if isinstance(value, str) else list(value)

    seen: dict[str, None] = {}
    for part in parts:
        if not isinstance(part, str):
            continue
        for raw in part.split(MUSCLE_DELIMITER):
            name = raw.strip().lower()
            if name:
                seen.setdefault(name, None)
    return tuple(seen)


@dataclass(frozen=True)
class ExerciseMeta:
    """Catalog entry for one exercise.

    Muscle fields are normalized on construction, so ``secondary_muscles``
    is always a tuple (possibly empty) whatever shape the catalog stored.
    """

    id: str
    target: str = ""
    secondary_muscles: tuple[str, ...] = field(default_factory=tuple)
    equipment: str = ""
    difficulty: str = ""
    category: str = ""
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "target", ", ".join(normalize_muscles(self.target)))
        object.__setattr__(
            self, "secondary_muscles", normalize_muscles(self.secondary_muscles)
        )
        object.__setattr__(self, "difficulty", (self.difficulty or "").strip().lower())
        object.__setattr__(self, "category", (self.category or "").strip().lower())

    @property
    def targets(self) -> tuple[str, ...]:
        """Primary muscles (a catalog target may name more than one)."""
        return normalize_muscles(self.target)

    @property
    def all_muscles(self) -> tuple[str, ...]:
        return normalize_muscles(self.targets + self.secondary_muscles)


@dataclass(frozen=True)
class ExerciseLibrary:
    """Frozen snapshot of the exercise catalog keyed by exercise id.

    The set of muscles that are a primary target of at least one exercise
    is derived from ``exercises`` on construction.
    """

    exercises: dict[str, ExerciseMeta] = field(default_factory=dict)
    target_muscles: frozenset[str] = field(default=frozenset(), init=False)

    def __post_init__(self) -> None:
        targets = frozenset(m for ex in self.exercises.values() for m in ex.targets)
        object.__setattr__(self, "target_muscles", targets)

    @classmethod
    def from_exercises(cls, exercises: Iterable[ExerciseMeta]) -> ExerciseLibrary:
        return cls(exercises={ex.id: ex for ex in exercises})

    def get(self, exercise_id: str | None) -> ExerciseMeta | None:
        """Look up an exercise; unknown or missing ids return None."""
        if exercise_id is None:
            return None
        return self.exercises.get(exercise_id)

    def is_primary_anywhere(self, muscle: str) -> bool:
        return muscle in self.target_muscles

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self.exercises

    def __iter__(self) -> Iterator[ExerciseMeta]:
        return iter(self.exercises.values())

    def __len__(self) -> int:
        return len(self.exercises)
