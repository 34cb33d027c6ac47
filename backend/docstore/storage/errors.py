"""
Storage error taxonomy.

Raw filesystem errors from the local backend (permission denied, disk full)
are never wrapped in these classes; they propagate as OSError subclasses.
"""
from typing import Optional


class StorageError(Exception):
    """Base class for storage gateway errors."""

    def __init__(self, message: str, backend: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.backend = backend


class NotFoundError(StorageError):
    """Requested path is absent in the active backend."""


class AlreadyExistsError(StorageError):
    """Hosted upload target already exists; uploads never overwrite."""


class ProviderError(StorageError):
    """Opaque failure reported by the hosted storage provider."""


class InvalidPathError(StorageError, ValueError):
    """Storage path escapes the local root or is otherwise malformed."""
