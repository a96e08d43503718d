"""Custom exception hierarchy for the profile store."""

from __future__ import annotations


class ProfileStoreError(Exception):
    """Base exception for all profile_store errors."""


class ProfileStoreIOError(ProfileStoreError):
    """A store document could not be read or written."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
