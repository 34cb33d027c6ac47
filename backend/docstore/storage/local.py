"""
Local filesystem storage.

Fallback used when hosted storage is not configured. Files live in a single
flat directory under their given names; there are no subdirectories and no
metadata sidecar files.
"""
import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from docstore.storage.base import (
    FileStore,
    FileSource,
    StorageBackend,
    UploadResult,
    LocalPathContent,
)
from docstore.storage.errors import NotFoundError, InvalidPathError

logger = logging.getLogger(__name__)


class LocalStore(FileStore):
    """
    Flat-directory file store.

    Writes are synchronous and uncoordinated: two uploads of the same
    name race and the last writer wins.
    """

    backend = StorageBackend.LOCAL

    def __init__(self, root: Union[str, os.PathLike]):
        """
        Create the store, creating the root directory if it is missing.

        Args:
            root: Directory holding uploaded files
        """
        self._root = Path(root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Local file storage initialized at {self._root}")

    @property
    def root(self) -> Path:
        """Directory holding uploaded files."""
        return self._root

    def _resolve(self, path: str) -> Path:
        """Resolve a storage path under the root, rejecting escapes."""
        try:
            candidate = (self._root / path).resolve()
        except (ValueError, OSError) as e:
            raise InvalidPathError(f"Invalid storage path: {path!r}", backend=self.backend.value) from e
        if candidate == self._root or not candidate.is_relative_to(self._root):
            raise InvalidPathError(f"Invalid storage path: {path!r}", backend=self.backend.value)
        return candidate

    def upload_file(self, content: FileSource, file_name: str, mime_type: str) -> UploadResult:
        if not file_name or Path(file_name).name != file_name:
            raise InvalidPathError(f"Invalid file name: {file_name!r}", backend=self.backend.value)

        destination = self._resolve(file_name)

        if isinstance(content, (bytes, bytearray, memoryview)):
            destination.write_bytes(bytes(content))
            logger.debug(f"Wrote {len(content)} bytes to {destination}")
        else:
            # Already materialized on disk (e.g. streamed to a temp file by the caller)
            source = Path(content)
            if not source.exists():
                raise FileNotFoundError(f"Source file not found: {source}")
            if source.resolve() == destination:
                logger.debug(f"File {source} already persisted, keeping as {file_name}")
            else:
                # Rename into place; shutil.move only copies across filesystems
                shutil.move(str(source), destination)
                logger.debug(f"Moved {source} to {destination}")

        return UploadResult(path=file_name, url=None, backend=self.backend)

    def get_file(self, path: str) -> LocalPathContent:
        local_path = self._resolve(path)
        if not local_path.is_file():
            raise NotFoundError(f"File not found: {path}", backend=self.backend.value)
        return LocalPathContent(path=local_path, backend=self.backend)

    def delete_file(self, path: str) -> bool:
        local_path = self._resolve(path)
        local_path.unlink(missing_ok=True)
        return True

    def get_signed_url(self, path: str, expires_in: int = 3600) -> Optional[str]:
        # No private-URL concept locally; callers serve the file themselves
        return None
