"""Document store backends."""

from sightlog.storage.base import BaseDocumentStore, check_index, get_sequence
from sightlog.storage.json_file import JsonFileStore
from sightlog.storage.memory import MemoryDocumentStore

__all__ = [
    "BaseDocumentStore",
    "check_index",
    "get_sequence",
    "JsonFileStore",
    "MemoryDocumentStore",
]
