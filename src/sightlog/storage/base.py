"""Shared read-modify-write logic for document stores.

Subclasses only know how to load and dump the whole document. Everything
else (append, remove, replace) is built on ``edit``, which holds the store's
lock for the full read, mutate and write cycle.

Without the lock, two concurrent ``edit`` calls could read the same
document, mutate private copies, and the second write would silently
discard the first mutation (a lost update). With it, cycles run one after
the other. Plain ``read`` calls do not take the lock and may see a
document that is about to be replaced.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from sightlog.core.exceptions import IndexOutOfRange, ParseFailure, UnknownField
from sightlog.models.document import Document

logger = logging.getLogger(__name__)


class BaseDocumentStore(ABC):
    """Base class implementing the ``DocumentStore`` protocol.

    Subclasses implement ``_load`` and ``_dump`` and set ``location``.
    """

    location: str = "<document>"

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._initialized = False

    async def initialize(self) -> None:
        """Mark the store ready. Idempotent."""
        self._initialized = True

    async def close(self) -> None:
        """Mark the store closed. Idempotent."""
        self._initialized = False

    @abstractmethod
    async def _load(self) -> Document:
        """Return a fresh, caller-owned copy of the stored document."""

    @abstractmethod
    async def _dump(self, doc: Document) -> None:
        """Replace the stored document with ``doc``."""

    # --- Whole-document Operations ---

    async def read(self) -> Document:
        """Load the document. Not serialized against writers."""
        return await self._load()

    async def write(self, doc: Document) -> None:
        """Replace the document, waiting for any edit in progress.

        Once started the write runs to completion even if the caller is
        cancelled.
        """
        await asyncio.shield(self._locked_write(doc))

    async def _locked_write(self, doc: Document) -> None:
        async with self._lock:
            await self._dump(doc)

    async def edit(self, mutator: Callable[[Document], Any]) -> Document:
        """Read the document, apply ``mutator`` in place, write it back.

        The mutator's return value is ignored. If it raises, nothing is
        written and the exception propagates.

        Cancelling the caller does not abort the cycle: the lock is held
        until the document is written, so a cancelled edit can still land.

        Returns:
            The document as written.
        """
        return await asyncio.shield(self._locked_edit(mutator))

    async def _locked_edit(self, mutator: Callable[[Document], Any]) -> Document:
        async with self._lock:
            doc = await self._load()
            mutator(doc)
            await self._dump(doc)
        return doc

    # --- Sequence Operations ---

    async def append(self, field: str, item: Any) -> None:
        """Push ``item`` onto the end of ``field``.

        Raises:
            UnknownField: ``field`` is not on the document.
        """

        def push(doc: Document) -> None:
            get_sequence(doc, field, self.location).append(item)

        doc = await self.edit(push)
        logger.debug(f"Appended to {field} in {self.location}, length now {len(doc[field])}")

    async def get_one(self, field: str, index: int) -> Any:
        """Return the element at ``index`` of ``field``.

        Raises:
            UnknownField: ``field`` is not on the document.
            IndexOutOfRange: ``index`` is outside ``[0, length)``.
        """
        seq = get_sequence(await self.read(), field, self.location)
        check_index(field, index, len(seq))
        return seq[index]

    async def remove_by_index(self, field: str, index: int) -> Any:
        """Remove and return the element at ``index``.

        Later elements shift down by one position. On error the document
        is left untouched.

        Raises:
            UnknownField: ``field`` is not on the document.
            IndexOutOfRange: ``index`` is outside ``[0, length)``.
        """
        removed: Any = None

        def pop(doc: Document) -> None:
            nonlocal removed
            seq = get_sequence(doc, field, self.location)
            check_index(field, index, len(seq))
            removed = seq.pop(index)

        await self.edit(pop)
        logger.debug(f"Removed {field}[{index}] from {self.location}")
        return removed

    async def edit_one_element(self, field: str, index: int, new_value: Any) -> Any:
        """Replace the element at ``index`` and return the previous value.

        Raises:
            UnknownField: ``field`` is not on the document.
            IndexOutOfRange: ``index`` is outside ``[0, length)``.
        """
        previous: Any = None

        def replace(doc: Document) -> None:
            nonlocal previous
            seq = get_sequence(doc, field, self.location)
            check_index(field, index, len(seq))
            previous = seq[index]
            seq[index] = new_value

        await self.edit(replace)
        logger.debug(f"Replaced {field}[{index}] in {self.location}")
        return previous


def get_sequence(doc: Document, field: str, location: str = "<document>") -> list[Any]:
    """Return the list stored under ``field``.

    Raises:
        UnknownField: ``field`` is not on the document.
        ParseFailure: ``field`` holds something other than a list.
    """
    if field not in doc:
        raise UnknownField(field)
    seq = doc[field]
    if not isinstance(seq, list):
        raise ParseFailure(location, f"field {field!r} is not a list")
    return seq


def check_index(field: str, index: int, length: int) -> None:
    """Raise ``IndexOutOfRange`` unless ``0 <= index < length``."""
    # bool is an int subclass; True must not address element 1
    if isinstance(index, bool) or not 0 <= index < length:
        raise IndexOutOfRange(field, index, length)
