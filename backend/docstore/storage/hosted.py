"""
Hosted S3-compatible object storage.

Uses boto3 with the S3-compatible API, so it works against any provider
exposing one (Supabase Storage, Cloudflare R2, MinIO, AWS S3).

All documents live in one bucket under the ``uploads/`` prefix. Uploads are
non-overwriting conditional creates; reads go through signed URLs unless the
bucket has a public base URL configured.
"""
import logging
import time
from pathlib import Path
from typing import Optional

import boto3
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from docstore.config import Settings
from docstore.storage.base import (
    FileStore,
    FileSource,
    StorageBackend,
    UploadResult,
    BytesContent,
)
from docstore.storage.errors import NotFoundError, AlreadyExistsError, ProviderError

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "uploads"

# Error codes S3-compatible providers return for a failed If-None-Match create
_EXISTS_CODES = {"PreconditionFailed", "ConditionalRequestConflict", "412", "409"}
_NOT_FOUND_CODES = {"NoSuchKey", "NotFound", "404"}


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def build_s3_client(settings: Settings) -> BaseClient:
    """
    Build a boto3 S3 client for the configured endpoint.

    Signature v4 and path-style addressing work across S3-compatible
    providers.
    """
    return boto3.client(
        's3',
        endpoint_url=settings.storage_endpoint,
        aws_access_key_id=settings.storage_access_key,
        aws_secret_access_key=settings.storage_secret_key,
        region_name=settings.storage_region,
        config=Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'}
        )
    )


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def _error_message(error: Exception) -> str:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Message") or str(error)
    return str(error)


class HostedStore(FileStore):
    """
    S3-compatible object store.

    The boto3 client is built once by the caller and passed in; the store
    never creates clients of its own.
    """

    backend = StorageBackend.HOSTED

    def __init__(self, client: BaseClient, bucket: str, public_url: Optional[str] = None):
        """
        Args:
            client: Configured boto3 S3 client
            bucket: Bucket holding all documents
            public_url: Public base URL for direct links, if the bucket is public
        """
        self._client = client
        self._bucket = bucket
        self._public_url = public_url.rstrip("/") if public_url else None
        logger.info(f"Hosted storage initialized for bucket: {bucket}")

    @property
    def bucket(self) -> str:
        """Configured bucket name."""
        return self._bucket

    @staticmethod
    def generate_object_key(file_name: str) -> str:
        """
        Generate the object key for an upload.

        Pattern: uploads/{epoch_ms}-{file_name}
        """
        return f"{UPLOAD_PREFIX}/{_now_ms()}-{file_name}"

    def public_url_for(self, object_key: str) -> Optional[str]:
        """Direct URL for an object, or None when the bucket is private."""
        if not self._public_url:
            return None
        return f"{self._public_url}/{object_key}"

    def upload_file(self, content: FileSource, file_name: str, mime_type: str) -> UploadResult:
        object_key = self.generate_object_key(file_name)

        try:
            if isinstance(content, (bytes, bytearray, memoryview)):
                self._put_new_object(object_key, bytes(content), mime_type)
            else:
                with open(Path(content), 'rb') as file_data:
                    self._put_new_object(object_key, file_data, mime_type)
        except ClientError as e:
            if _error_code(e) in _EXISTS_CODES:
                raise AlreadyExistsError(
                    f"Object already exists: {object_key}",
                    backend=self.backend.value
                ) from e
            raise ProviderError(
                f"Hosted upload failed: {_error_message(e)}",
                backend=self.backend.value
            ) from e
        except BotoCoreError as e:
            raise ProviderError(
                f"Hosted upload failed: {_error_message(e)}",
                backend=self.backend.value
            ) from e

        logger.debug(f"Uploaded {object_key} to bucket {self._bucket}")
        return UploadResult(
            path=object_key,
            url=self.public_url_for(object_key),
            backend=self.backend
        )

    def _put_new_object(self, object_key: str, body, mime_type: str) -> None:
        self._client.put_object(
            Bucket=self._bucket,
            Key=object_key,
            Body=body,
            ContentType=mime_type or "application/octet-stream",
            IfNoneMatch="*",
        )

    def get_file(self, path: str) -> BytesContent:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=path)
            data = response["Body"].read()
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise NotFoundError(f"File not found: {path}", backend=self.backend.value) from e
            raise ProviderError(
                f"Hosted download failed: {_error_message(e)}",
                backend=self.backend.value
            ) from e
        except BotoCoreError as e:
            raise ProviderError(
                f"Hosted download failed: {_error_message(e)}",
                backend=self.backend.value
            ) from e

        return BytesContent(data=data, backend=self.backend)

    def delete_file(self, path: str) -> bool:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=path)
            logger.debug(f"Deleted object {path} from bucket {self._bucket}")
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Hosted delete failed for {path}: {_error_message(e)}")
            return False

    def get_signed_url(self, path: str, expires_in: int = 3600) -> Optional[str]:
        try:
            return self._client.generate_presigned_url(
                ClientMethod='get_object',
                Params={
                    'Bucket': self._bucket,
                    'Key': path,
                },
                ExpiresIn=expires_in
            )
        except (ClientError, BotoCoreError) as e:
            raise ProviderError(
                f"Failed to create signed URL: {_error_message(e)}",
                backend=self.backend.value
            ) from e
