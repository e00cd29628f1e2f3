from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import Invalid, Path, Reason


class StorageError(Exception):
    """Base class for every error raised by safe_storage."""


class SchemaDefinitionError(StorageError, ValueError):
    """The schema itself is malformed (unknown type tag, empty tuple items, ...)."""


class SchemaValidationError(StorageError):
    """
    A value did not match its schema.

    Raised by `StorageMap.get` when stored data is invalid, and by `StorageMap.set`
    before anything is written.
    """

    def __init__(self, key: str, path: Path, reason: Reason, message: str):
        self.key = key
        self.path = path
        self.reason = reason
        self.message = message
        where = "/".join(str(p) for p in path) or "<root>"
        super().__init__(f"{key!r} at {where}: {message} ({reason.value})")

    @classmethod
    def from_result(cls, key: str, result: Invalid) -> "SchemaValidationError":
        return cls(key, result.path, result.reason, result.message)


class BackendError(StorageError):
    """Failure raised by one of the bundled backends (I/O, unreadable document, non-JSON value)."""
