"""Serialization module — profile aggregates to and from store documents."""

from progression_engine.serialization.profile_document import (
    from_profile_document,
    to_profile_document,
    to_profile_document_string,
)

__all__ = ["from_profile_document", "to_profile_document", "to_profile_document_string"]
