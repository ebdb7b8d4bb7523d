"""Data models."""

from sightlog.models.document import (
    CREATED_AT,
    SIGHTINGS,
    Document,
    ShapeBucket,
    Sighting,
    SightingEntry,
    SightLogModel,
    empty_document,
)

__all__ = [
    "CREATED_AT",
    "SIGHTINGS",
    "Document",
    "ShapeBucket",
    "Sighting",
    "SightingEntry",
    "SightLogModel",
    "empty_document",
]
