"""
Storage module for document files.

Routes every file operation to either hosted S3-compatible object storage
or a local directory, chosen once at startup from configuration.
"""
from docstore.storage.base import (
    FileStore,
    StorageBackend,
    UploadResult,
    BytesContent,
    LocalPathContent,
    FileContent,
)
from docstore.storage.errors import (
    StorageError,
    NotFoundError,
    AlreadyExistsError,
    ProviderError,
    InvalidPathError,
)
from docstore.storage.hosted import HostedStore, build_s3_client
from docstore.storage.local import LocalStore
from docstore.storage.gateway import StorageGateway, create_file_store, build_storage_gateway

__all__ = [
    "FileStore",
    "StorageBackend",
    "UploadResult",
    "BytesContent",
    "LocalPathContent",
    "FileContent",
    "StorageError",
    "NotFoundError",
    "AlreadyExistsError",
    "ProviderError",
    "InvalidPathError",
    "HostedStore",
    "LocalStore",
    "build_s3_client",
    "StorageGateway",
    "create_file_store",
    "build_storage_gateway",
]
