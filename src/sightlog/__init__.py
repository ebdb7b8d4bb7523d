"""
SightLog - a sighting log kept in a single JSON document.

Users report sightings through HTML forms; every report is appended to the
``sightings`` list of one JSON file. A sighting is identified by its position
in that list.

Key Features:
- Whole-document read-modify-write store with serialized mutations
- Bounds-checked append / edit / remove by index
- Case-insensitive grouping of sightings by shape
- Server-rendered FastAPI + Jinja2 pages, typer CLI

Quick Start:
    >>> from sightlog import JsonFileStore, SightingService
    >>> store = JsonFileStore("data.json")
    >>> service = SightingService(store)
    >>> # await store.initialize(); await service.create({"shape": "disk"})

Architecture:
    Stores: JsonFileStore, MemoryDocumentStore
    Service: SightingService
    Web: sightlog.api.app.create_app
"""

__version__ = "0.1.0"

from sightlog.core.config import Settings, get_settings
from sightlog.core.exceptions import (
    IndexOutOfRange,
    NotFoundError,
    ParseFailure,
    ReadFailure,
    SightLogError,
    StorageError,
    UnknownField,
    WriteFailure,
)
from sightlog.core.visits import VisitCounter
from sightlog.models.document import CREATED_AT, SIGHTINGS, empty_document
from sightlog.protocols.storage import DocumentStore
from sightlog.service import SightingService
from sightlog.storage.json_file import JsonFileStore
from sightlog.storage.memory import MemoryDocumentStore
from sightlog.utils.grouping import MISSING, group_by_key

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "IndexOutOfRange",
    "NotFoundError",
    "ParseFailure",
    "ReadFailure",
    "SightLogError",
    "StorageError",
    "UnknownField",
    "WriteFailure",
    # Model
    "CREATED_AT",
    "SIGHTINGS",
    "empty_document",
    # Storage
    "DocumentStore",
    "JsonFileStore",
    "MemoryDocumentStore",
    # Service
    "SightingService",
    "VisitCounter",
    # Grouping
    "MISSING",
    "group_by_key",
]
