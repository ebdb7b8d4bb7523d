"""Custom exceptions.

SightLog uses a hierarchy of exceptions so that request handlers can map
each storage failure to an HTTP status:

Example:
    >>> from sightlog.core.exceptions import IndexOutOfRange, SightLogError
    >>> try:
    ...     raise IndexOutOfRange("sightings", 7, 3)
    ... except SightLogError as e:
    ...     print(f"Caught: {type(e).__name__}")
    Caught: IndexOutOfRange
"""

from __future__ import annotations

from pathlib import Path


class SightLogError(Exception):
    """Base exception for SightLog.

    Example:
        >>> from sightlog.core.exceptions import SightLogError
        >>> e = SightLogError("something went wrong")
        >>> str(e)
        'something went wrong'
    """


class StorageError(SightLogError):
    """Document store operation failed."""


class NotFoundError(SightLogError):
    """Requested resource not found."""


class ReadFailure(StorageError):
    """The backing file could not be read (missing, permission denied, ...).

    Example:
        >>> from pathlib import Path
        >>> from sightlog.core.exceptions import ReadFailure
        >>> str(ReadFailure(Path("data.json"), "No such file"))
        'cannot read data.json: No such file'
    """

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot read {self.path}: {reason}")


class ParseFailure(StorageError):
    """The backing file is not a well-formed document."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot parse {self.path}: {reason}")


class WriteFailure(StorageError):
    """The document could not be serialized or persisted."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot write {self.path}: {reason}")


class UnknownField(StorageError):
    """The document has no field with the requested name.

    Example:
        >>> from sightlog.core.exceptions import UnknownField
        >>> raise UnknownField("recipes")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        UnknownField: document has no field 'recipes'
    """

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"document has no field {field!r}")


class IndexOutOfRange(StorageError, NotFoundError):
    """Index is outside ``[0, length)`` of the target sequence.

    Example:
        >>> from sightlog.core.exceptions import IndexOutOfRange
        >>> e = IndexOutOfRange("sightings", 5, 2)
        >>> (e.index, e.length)
        (5, 2)
        >>> str(e)
        'index 5 out of range for sightings (length 2)'
    """

    def __init__(self, field: str, index: int, length: int) -> None:
        self.field = field
        self.index = index
        self.length = length
        super().__init__(f"index {index} out of range for {field} (length {length})")
