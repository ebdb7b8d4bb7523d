"""In-memory document store for testing.

Implements the same contract as ``JsonFileStore`` without touching disk.
Documents pass through a JSON round trip on every load and dump, so callers
never share objects with the store and unserializable values fail exactly
as they would against a file.

Example:
    >>> import asyncio
    >>> from sightlog.storage.memory import MemoryDocumentStore
    >>> async def example():
    ...     store = MemoryDocumentStore()
    ...     await store.append("sightings", {"shape": "cigar"})
    ...     return await store.remove_by_index("sightings", 0)
    >>> asyncio.run(example())
    {'shape': 'cigar'}
"""

from __future__ import annotations

import asyncio
import json

from sightlog.core.exceptions import WriteFailure
from sightlog.models.document import Document, empty_document
from sightlog.storage.base import BaseDocumentStore


class MemoryDocumentStore(BaseDocumentStore):
    """Document store holding the serialized document in memory.

    Data is lost when the process exits.

    Best for: Testing, development.
    """

    location = "<memory>"

    def __init__(self, document: Document | None = None) -> None:
        """Initialize the store.

        Args:
            document: Initial content; defaults to an empty sightings list.
        """
        super().__init__()
        self._text = json.dumps(document if document is not None else empty_document())
        self.writes = 0

    async def _load(self) -> Document:
        # Yield like real I/O so concurrent callers interleave.
        await asyncio.sleep(0)
        return json.loads(self._text)

    async def _dump(self, doc: Document) -> None:
        await asyncio.sleep(0)
        try:
            self._text = json.dumps(doc)
        except (TypeError, ValueError) as e:
            raise WriteFailure(self.location, f"not serializable: {e}") from e
        self.writes += 1
