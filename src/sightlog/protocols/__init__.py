"""Protocol definitions for pluggable backends."""

from sightlog.protocols.storage import DocumentStore

__all__ = ["DocumentStore"]
