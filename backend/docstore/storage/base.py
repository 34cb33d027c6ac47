"""
Base class for file stores.
All storage backends implement this interface so callers never branch on
configuration, only on the backend-tagged results.
"""
import enum
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Union


class StorageBackend(str, enum.Enum):
    """Backend tag returned alongside every storage result."""
    HOSTED = "hosted"
    LOCAL = "local"


# Upload input: raw bytes, or a reference to a file already on disk
FileSource = Union[bytes, str, os.PathLike]


@dataclass(frozen=True)
class UploadResult:
    """Outcome of an upload."""
    path: str
    url: Optional[str]
    backend: StorageBackend


@dataclass(frozen=True)
class BytesContent:
    """File content fetched fully into memory."""
    data: bytes
    backend: StorageBackend
    kind: Literal["bytes"] = "bytes"


@dataclass(frozen=True)
class LocalPathContent:
    """Reference to a file on local disk; the caller streams it."""
    path: Path
    backend: StorageBackend
    kind: Literal["localPath"] = "localPath"


FileContent = Union[BytesContent, LocalPathContent]


class FileStore(ABC):
    """
    Abstract base class for storage backends.

    All stores must implement:
    - upload_file(): Persist content and return its storage path
    - get_file(): Fetch content (bytes or a local path reference)
    - delete_file(): Best-effort removal
    - get_signed_url(): Time-limited read URL, if the backend has one
    """

    backend: StorageBackend

    @abstractmethod
    def upload_file(self, content: FileSource, file_name: str, mime_type: str) -> UploadResult:
        """
        Store a new file. Never overwrites an existing object.

        Args:
            content: Raw bytes or a path to a file already on disk
            file_name: Desired file name
            mime_type: Declared MIME type

        Returns:
            UploadResult with the stored path, optional direct URL and backend tag
        """
        pass

    @abstractmethod
    def get_file(self, path: str) -> FileContent:
        """
        Fetch a stored file.

        Raises:
            NotFoundError: If the path does not exist
        """
        pass

    @abstractmethod
    def delete_file(self, path: str) -> bool:
        """
        Remove a stored file. Never raises for provider-side failures.

        Returns:
            True if the file is gone, False if the backend failed to remove it
        """
        pass

    @abstractmethod
    def get_signed_url(self, path: str, expires_in: int = 3600) -> Optional[str]:
        """Return a time-limited read URL, or None if the backend has none."""
        pass
