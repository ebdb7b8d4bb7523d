"""Sighting operations used by the web handlers and the CLI.

``SightingService`` turns form submissions into document mutations. It
never caches the document: every call re-reads it, so an index always
refers to the list as it is at the time of the call.

Example:
    >>> import asyncio
    >>> from datetime import datetime
    >>> from sightlog.service import SightingService
    >>> from sightlog.storage.memory import MemoryDocumentStore
    >>> async def example():
    ...     service = SightingService(MemoryDocumentStore())
    ...     await service.create({"shape": "Triangle"}, now=datetime(2021, 5, 13, 21, 4))
    ...     return await service.get(0)
    >>> asyncio.run(example())
    {'shape': 'Triangle', 'post_create_date_time': '13/05/2021 21:04'}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sightlog.models.document import (
    CREATED_AT,
    SIGHTINGS,
    Document,
    ShapeBucket,
    Sighting,
    SightingEntry,
)
from sightlog.protocols.storage import DocumentStore
from sightlog.storage.base import check_index, get_sequence
from sightlog.utils.dates import post_timestamp
from sightlog.utils.grouping import group_by_key

logger = logging.getLogger(__name__)

SHAPE = "shape"


class SightingService:
    """Create, read, replace and delete sightings by position."""

    def __init__(self, store: DocumentStore, field: str = SIGHTINGS) -> None:
        self.store = store
        self.field = field

    async def sightings(self) -> list[Sighting]:
        """All sightings in stored order."""
        return get_sequence(await self.store.read(), self.field)

    async def entries(self) -> list[SightingEntry]:
        """All sightings paired with their current index."""
        return [SightingEntry(index=i, sighting=s) for i, s in enumerate(await self.sightings())]

    async def get(self, index: int) -> Sighting:
        return await self.store.get_one(self.field, index)

    async def create(self, fields: Mapping[str, Any], now: datetime | None = None) -> Sighting:
        """Append a sighting, stamping its creation time.

        Any ``post_create_date_time`` in ``fields`` is overwritten.
        """
        sighting = dict(fields)
        sighting[CREATED_AT] = post_timestamp(now)
        await self.store.append(self.field, sighting)
        logger.info(f"New sighting submitted ({sighting.get(SHAPE, 'no shape')})")
        return sighting

    async def replace(self, index: int, fields: Mapping[str, Any]) -> Sighting:
        """Replace every field of the sighting at ``index``.

        The creation stamp of the existing sighting is carried over, and the
        lookup and write happen in one locked edit cycle.

        Returns:
            The sighting as stored.
        """
        updated = dict(fields)

        def apply(doc: Document) -> None:
            seq = get_sequence(doc, self.field)
            check_index(self.field, index, len(seq))
            previous = seq[index]
            updated.pop(CREATED_AT, None)
            if isinstance(previous, Mapping) and CREATED_AT in previous:
                updated[CREATED_AT] = previous[CREATED_AT]
            seq[index] = updated

        await self.store.edit(apply)
        logger.info(f"Sighting {index} edited")
        return updated

    async def delete(self, index: int) -> Sighting:
        removed = await self.store.remove_by_index(self.field, index)
        logger.info(f"Sighting {index} deleted")
        return removed

    async def shapes(self) -> list[ShapeBucket]:
        """One bucket per distinct (case-insensitive) shape, first-seen order."""
        groups = group_by_key(await self.sightings(), SHAPE)
        return [ShapeBucket(key=key, count=len(members)) for key, members in groups.items()]

    async def with_shape(self, shape: str) -> list[SightingEntry]:
        """Sightings whose shape matches ``shape`` case-insensitively.

        An unknown shape yields an empty list.
        """
        sightings = await self.sightings()
        positions = {id(s): i for i, s in enumerate(sightings)}
        members = group_by_key(sightings, SHAPE).get(shape.lower(), [])
        return [SightingEntry(index=positions[id(s)], sighting=s) for s in members]
