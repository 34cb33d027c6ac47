"""
Storage gateway and backend factory.

The backend is selected exactly once, when the gateway is built at startup:
- STORAGE_ENDPOINT + STORAGE_ACCESS_KEY + STORAGE_SECRET_KEY → HostedStore
- otherwise → LocalStore under LOCAL_UPLOAD_DIR

The gateway is then passed to callers; nothing downstream re-reads the
configuration or switches backend mid-process.
"""
import logging
import time
from typing import Optional

from docstore.config import Settings
from docstore.storage.base import FileStore, FileSource, FileContent, StorageBackend, UploadResult
from docstore.storage.errors import StorageError
from docstore.storage.hosted import HostedStore, build_s3_client
from docstore.storage.local import LocalStore
from docstore.utils.logging import log_storage_operation, log_storage_failure
from docstore.utils.metrics import storage_operations_total, storage_operation_duration_seconds

logger = logging.getLogger(__name__)


def create_file_store(settings: Settings) -> FileStore:
    """
    Factory function to get the configured file store.

    Returns:
        HostedStore if hosted storage is fully configured, else LocalStore
    """
    if settings.hosted_storage_configured:
        client = build_s3_client(settings)
        logger.info("Using hosted storage")
        return HostedStore(
            client=client,
            bucket=settings.storage_bucket,
            public_url=settings.storage_public_url
        )

    logger.info("Using local file storage (hosted storage not configured)")
    return LocalStore(settings.local_upload_dir)


class StorageGateway:
    """
    Uniform entry point for document storage.

    Wraps one FileStore for the lifetime of the process and records
    logs and metrics for every operation.
    """

    def __init__(self, store: FileStore, default_expires_in: int = 3600):
        self._store = store
        self._default_expires_in = default_expires_in

    @property
    def store(self) -> FileStore:
        return self._store

    @property
    def backend(self) -> StorageBackend:
        return self._store.backend

    def is_using_hosted_storage(self) -> bool:
        """Check whether the hosted backend is active."""
        return self._store.backend is StorageBackend.HOSTED

    def _observe(self, operation: str, status: str, started: float) -> float:
        duration = time.perf_counter() - started
        storage_operations_total.labels(
            backend=self.backend.value,
            operation=operation,
            status=status
        ).inc()
        storage_operation_duration_seconds.labels(
            backend=self.backend.value,
            operation=operation
        ).observe(duration)
        return duration * 1000

    def upload_file(self, content: FileSource, file_name: str, mime_type: str) -> UploadResult:
        started = time.perf_counter()
        try:
            result = self._store.upload_file(content, file_name, mime_type)
        except (StorageError, OSError) as e:
            duration_ms = self._observe("upload", "error", started)
            log_storage_failure(
                logger, "upload", self.backend.value, str(e),
                path=file_name, duration_ms=duration_ms,
                include_traceback=isinstance(e, OSError)
            )
            raise
        duration_ms = self._observe("upload", "success", started)
        log_storage_operation(
            logger, "upload", self.backend.value,
            path=result.path, duration_ms=duration_ms, content_type=mime_type
        )
        return result

    def get_file(self, path: str) -> FileContent:
        started = time.perf_counter()
        try:
            content = self._store.get_file(path)
        except (StorageError, OSError) as e:
            duration_ms = self._observe("get", "error", started)
            log_storage_failure(
                logger, "get", self.backend.value, str(e),
                path=path, duration_ms=duration_ms,
                include_traceback=isinstance(e, OSError)
            )
            raise
        duration_ms = self._observe("get", "success", started)
        log_storage_operation(logger, "get", self.backend.value, path=path, duration_ms=duration_ms)
        return content

    def delete_file(self, path: str) -> bool:
        started = time.perf_counter()
        try:
            deleted = self._store.delete_file(path)
        except (StorageError, OSError) as e:
            duration_ms = self._observe("delete", "error", started)
            log_storage_failure(
                logger, "delete", self.backend.value, str(e),
                path=path, duration_ms=duration_ms,
                include_traceback=isinstance(e, OSError)
            )
            raise
        duration_ms = self._observe("delete", "success" if deleted else "error", started)
        if deleted:
            log_storage_operation(logger, "delete", self.backend.value, path=path, duration_ms=duration_ms)
        else:
            log_storage_failure(
                logger, "delete", self.backend.value, "delete not confirmed by backend",
                path=path, duration_ms=duration_ms
            )
        return deleted

    def get_signed_url(self, path: str, expires_in: Optional[int] = None) -> Optional[str]:
        if expires_in is None:
            expires_in = self._default_expires_in
        started = time.perf_counter()
        try:
            url = self._store.get_signed_url(path, expires_in)
        except StorageError as e:
            duration_ms = self._observe("sign", "error", started)
            log_storage_failure(
                logger, "sign", self.backend.value, str(e),
                path=path, duration_ms=duration_ms
            )
            raise
        duration_ms = self._observe("sign", "success", started)
        log_storage_operation(
            logger, "sign", self.backend.value,
            path=path, duration_ms=duration_ms, expires_in=expires_in
        )
        return url


def build_storage_gateway(settings: Settings) -> StorageGateway:
    """Select the backend and build the gateway. Called once at startup."""
    return StorageGateway(
        create_file_store(settings),
        default_expires_in=settings.storage_signed_url_expiration
    )
