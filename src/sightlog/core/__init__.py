"""Core configuration and utilities."""

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

__all__ = [
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
    # Services
    "VisitCounter",
]
