"""Profile store — all persistence for profiles, logs and the exercise catalog."""

from profile_store.exceptions import ProfileStoreError, ProfileStoreIOError
from profile_store.log_mapper import map_exercise, map_log_entry, map_profile
from profile_store.repository import (
    InMemoryProfileRepository,
    JsonProfileRepository,
    ProfileRepository,
)

__all__ = [
    "InMemoryProfileRepository",
    "JsonProfileRepository",
    "ProfileRepository",
    "ProfileStoreError",
    "ProfileStoreIOError",
    "map_exercise",
    "map_log_entry",
    "map_profile",
]
