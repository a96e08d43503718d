"""Profile repositories — all profile store I/O lives here.

The engine is pure; callers load a user's profile, logs and the exercise
library through a ProfileRepository, run the engine, and hand the
returned aggregates back to ``save_profile``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Optional

from progression_engine.models.exercise import ExerciseLibrary, ExerciseMeta
from progression_engine.models.log_entry import LogEntry
from progression_engine.models.profile import ProfileAggregates
from progression_engine.serialization import to_profile_document

from profile_store.exceptions import ProfileStoreIOError
from profile_store.log_mapper import map_exercise, map_log_entry, map_profile

logger = logging.getLogger(__name__)


class ProfileRepository(ABC):
    """Storage seam for per-user profile aggregates, logs and the catalog."""

    @abstractmethod
    def load_profile(self, user_id: str) -> ProfileAggregates:
        """Stored aggregates, or an empty profile if the user has none yet."""

    @abstractmethod
    def save_profile(self, user_id: str, profile: ProfileAggregates) -> None:
        """Persist *profile* as the user's aggregates."""

    @abstractmethod
    def load_logs(self, user_id: str) -> list[LogEntry]:
        """Every exercise and food log for the user."""

    @abstractmethod
    def load_library(self) -> ExerciseLibrary:
        """Snapshot of the exercise catalog."""

    @abstractmethod
    def list_users(self) -> list[str]:
        """Ids of every user with a stored profile or log history."""


class InMemoryProfileRepository(ProfileRepository):
    """Dict-backed repository for tests and one-off scripts."""

    def __init__(
        self,
        library: Optional[ExerciseLibrary] = None,
        logs: Optional[dict[str, Iterable[LogEntry]]] = None,
        profiles: Optional[dict[str, ProfileAggregates]] = None,
    ) -> None:
        self._library = library or ExerciseLibrary()
        self._logs = {uid: list(entries) for uid, entries in (logs or {}).items()}
        self._profiles = dict(profiles or {})

    def load_profile(self, user_id: str) -> ProfileAggregates:
        return self._profiles.get(user_id, ProfileAggregates())

    def save_profile(self, user_id: str, profile: ProfileAggregates) -> None:
        self._profiles[user_id] = profile

    def load_logs(self, user_id: str) -> list[LogEntry]:
        return list(self._logs.get(user_id, []))

    def load_library(self) -> ExerciseLibrary:
        return self._library

    def list_users(self) -> list[str]:
        return sorted(set(self._profiles) | set(self._logs))


class JsonProfileRepository(ProfileRepository):
    """Repository over a directory of JSON documents.

    Layout under *root*::

        profiles/<user_id>.json    profile document (camelCase)
        logs/<user_id>.json        list of log documents
        exercise_library.json      list of exercise documents
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser()
        self._profiles_dir = self._root / "profiles"
        self._logs_dir = self._root / "logs"
        self._library_path = self._root / "exercise_library.json"

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def load_profile(self, user_id: str) -> ProfileAggregates:
        path = self._profiles_dir / f"{user_id}.json"
        if not path.exists():
            logger.info("No profile for %s yet; starting empty", user_id)
            return ProfileAggregates()
        doc = self._read_json(path)
        if not isinstance(doc, dict):
            raise ProfileStoreIOError(f"Profile document is not an object: {path}", str(path))
        return map_profile(doc)

    def save_profile(self, user_id: str, profile: ProfileAggregates) -> None:
        path = self._profiles_dir / f"{user_id}.json"
        self._write_json(path, to_profile_document(profile))
        logger.info("Saved profile for %s (total_xp=%d)", user_id, profile.total_xp)

    # ------------------------------------------------------------------
    # Logs and catalog
    # ------------------------------------------------------------------

    def load_logs(self, user_id: str) -> list[LogEntry]:
        path = self._logs_dir / f"{user_id}.json"
        if not path.exists():
            return []
        docs = self._read_list(path)
        logs = [map_log_entry(doc, user_id) for doc in docs if isinstance(doc, dict)]
        return [log for log in logs if log is not None]

    def load_library(self) -> ExerciseLibrary:
        if not self._library_path.exists():
            logger.warning("Exercise library not found at %s", self._library_path)
            return ExerciseLibrary()
        docs = self._read_list(self._library_path)
        exercises: list[ExerciseMeta] = []
        for doc in docs:
            if isinstance(doc, dict):
                meta = map_exercise(doc)
                if meta is not None:
                    exercises.append(meta)
        return ExerciseLibrary.from_exercises(exercises)

    def list_users(self) -> list[str]:
        users: set[str] = set()
        for directory in (self._profiles_dir, self._logs_dir):
            if directory.is_dir():
                users.update(p.stem for p in directory.glob("*.json"))
        return sorted(users)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _read_json(self, path: Path) -> Any:
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ProfileStoreIOError(f"Failed to read {path}: {exc}", str(path)) from exc

    def _read_list(self, path: Path) -> list:
        docs = self._read_json(path)
        if not isinstance(docs, list):
            raise ProfileStoreIOError(f"Expected a JSON list in {path}", str(path))
        return docs

    def _write_json(self, path: Path, doc: Any) -> None:
        """Write *doc* atomically: temp file in the same directory, then replace."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(doc, f, indent=2, sort_keys=True)
                os.replace(tmp_name, path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise ProfileStoreIOError(f"Failed to write {path}: {exc}", str(path)) from exc
