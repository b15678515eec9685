"""Typed failures raised by the record stores."""

from typing import Dict, Optional


class RegistryError(Exception):
    """Base class for every failure an operation can report to its caller."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidArgument(RegistryError):
    """Raised when an input is malformed, missing or out of range."""


class Conflict(RegistryError):
    """Raised on a uniqueness violation or an unsatisfiable sell quantity."""


class NotFound(RegistryError):
    """Raised when an identifier does not resolve to an existing entity."""


class DependencyFailure(RegistryError):
    """Raised (or returned as a warning) when a related entity is out of step."""


class StorageError(RegistryError):
    """Base class for record file faults."""


class StorageUnavailable(StorageError):
    """Raised when a record file exists but cannot be read or parsed."""


class StorageWriteError(StorageError):
    """Raised when a collection cannot be written back to its record file."""
