"""JSON file document store.

Keeps the whole document in one human-readable JSON file. Every operation
reads or rewrites the complete file, so cost grows with the document; that
is fine for a low-traffic, single-process app.

Example:
    >>> import asyncio
    >>> import tempfile
    >>> from pathlib import Path
    >>> from sightlog.storage.json_file import JsonFileStore
    >>> async def example():
    ...     with tempfile.TemporaryDirectory() as tmpdir:
    ...         store = JsonFileStore(Path(tmpdir) / "data.json")
    ...         await store.initialize()
    ...         await store.append("sightings", {"shape": "disk"})
    ...         return await store.read()
    >>> asyncio.run(example())
    {'sightings': [{'shape': 'disk'}]}
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import uuid
from pathlib import Path

from sightlog.core.exceptions import ParseFailure, ReadFailure, WriteFailure
from sightlog.models.document import Document, empty_document
from sightlog.storage.base import BaseDocumentStore

logger = logging.getLogger(__name__)


class JsonFileStore(BaseDocumentStore):
    """Document store backed by a single JSON file.

    File I/O runs in a worker thread, so each operation suspends the
    calling coroutine and other requests can proceed meanwhile. Mutations
    are still serialized by the lock in ``BaseDocumentStore``.

    Writes go to a temporary sibling file that is then moved over the
    target, so a failed write leaves the previous document in place.

    Best for: Single-process deployments with small documents.
    """

    def __init__(
        self,
        path: str | Path = "data.json",
        *,
        create: bool = True,
        indent: int | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            path: JSON file holding the document.
            create: Seed an empty document on ``initialize`` if the file is missing.
            indent: JSON indentation; ``None`` writes a single line.
        """
        super().__init__()
        self._path = Path(path)
        self._create = create
        self._indent = indent

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:  # type: ignore[override]
        return str(self._path)

    async def initialize(self) -> None:
        """Create the file with an empty document if it does not exist.

        An existing file is never touched, even if it is malformed.
        """
        if self._create:
            await asyncio.shield(self._locked_seed())
        await super().initialize()

    async def _locked_seed(self) -> None:
        async with self._lock:
            await asyncio.to_thread(self._seed)

    async def _load(self) -> Document:
        return await asyncio.to_thread(self._read_file)

    async def _dump(self, doc: Document) -> None:
        await asyncio.to_thread(self._write_file, doc)

    def _seed(self) -> None:
        if self._path.exists():
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteFailure(self._path, e.strerror or str(e)) from e
        self._write_file(empty_document())
        logger.info(f"Created empty document at {self._path}")

    def _read_file(self) -> Document:
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Read error on {self._path}: {e}")
            raise ReadFailure(self._path, e.strerror or str(e)) from e
        except UnicodeDecodeError as e:
            raise ParseFailure(self._path, str(e)) from e

        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed JSON in {self._path}: {e}")
            raise ParseFailure(self._path, str(e)) from e

        if not isinstance(doc, dict):
            raise ParseFailure(self._path, f"expected a JSON object, got {type(doc).__name__}")
        return doc

    def _write_file(self, doc: Document) -> None:
        try:
            text = json.dumps(doc, indent=self._indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise WriteFailure(self._path, f"not serializable: {e}") from e

        suffix = f"{os.getpid()}.{uuid.uuid4().hex[:8]}"
        tmp = self._path.with_name(f".{self._path.name}.{suffix}.tmp")
        try:
            tmp.write_text(text, encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            logger.error(f"Write error on {self._path}: {e}")
            raise WriteFailure(self._path, e.strerror or str(e)) from e
        logger.debug(f"Wrote {len(text)} bytes to {self._path}")
