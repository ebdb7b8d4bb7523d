"""Document and sighting types.

The whole persisted state is one JSON object holding an ordered list of
sightings. A sighting has no stored id: its position in the list is its
identity, so removing index ``i`` renumbers everything after it.

Example:
    >>> from sightlog.models.document import SIGHTINGS, empty_document
    >>> empty_document()
    {'sightings': []}
    >>> SIGHTINGS
    'sightings'
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# A sighting is a free-form mapping of form field to submitted string.
Sighting = dict[str, Any]

# The document is the parsed JSON object; only ``sightings`` is expected.
Document = dict[str, Any]

SIGHTINGS = "sightings"
CREATED_AT = "post_create_date_time"


def empty_document() -> Document:
    """Return the document written to a fresh store."""
    return {SIGHTINGS: []}


class SightLogModel(BaseModel):
    """Base model with standard configuration."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
    )


class SightingEntry(SightLogModel):
    """A sighting paired with the position it had when the document was read.

    Example:
        >>> from sightlog.models.document import SightingEntry
        >>> entry = SightingEntry(index=2, sighting={"shape": "disk"})
        >>> entry.index
        2
    """

    index: int = Field(..., ge=0, description="Position in the sightings list")
    sighting: Any = Field(default_factory=dict)


class ShapeBucket(SightLogModel):
    """Summary of one grouping bucket for the shapes index.

    ``key`` is ``None`` for sightings without a shape.
    """

    key: str | None = Field(default=None, description="Lowercased shape, or None")
    count: int = Field(default=0, ge=0)

    @property
    def label(self) -> str:
        return self.key if self.key is not None else "(no shape)"
