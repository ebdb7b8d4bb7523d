"""Document store protocol.

Defines the interface for stores holding the single sightings document.

Example:
    >>> from sightlog.protocols.storage import DocumentStore
    >>> hasattr(DocumentStore, "remove_by_index")
    True
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sightlog.models import Document


@runtime_checkable
class DocumentStore(Protocol):
    """Document store protocol.

    Every mutation is a whole-document read-modify-write. Implementations
    must serialize those cycles so that concurrent mutations never lose
    each other's updates; plain reads may observe slightly stale state.

    See Also:
        sightlog.storage.json_file.JsonFileStore: File-backed implementation
        sightlog.storage.memory.MemoryDocumentStore: In-memory implementation
    """

    async def initialize(self) -> None:
        """Prepare the store for use."""
        ...

    async def close(self) -> None:
        """Release resources."""
        ...

    # --- Whole-document Operations ---

    async def read(self) -> Document:
        """Load and return the document."""
        ...

    async def write(self, doc: Document) -> None:
        """Replace the stored document."""
        ...

    async def edit(self, mutator: Callable[[Document], Any]) -> Document:
        """Read, mutate in place, write back. Returns the written document."""
        ...

    # --- Sequence Operations ---

    async def append(self, field: str, item: Any) -> None:
        """Push ``item`` onto the named sequence."""
        ...

    async def get_one(self, field: str, index: int) -> Any:
        """Return the element at ``index``."""
        ...

    async def remove_by_index(self, field: str, index: int) -> Any:
        """Remove and return the element at ``index``."""
        ...

    async def edit_one_element(self, field: str, index: int, new_value: Any) -> Any:
        """Replace the element at ``index`` and return the previous value."""
        ...
