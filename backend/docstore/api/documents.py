"""
Document file endpoints.

1. POST /documents - Upload a document
2. GET /documents/{path} - Download a document
3. GET /documents/{path}/signed-url - Time-limited read URL (hosted only)
4. DELETE /documents/{path} - Remove a document

Gateway calls block (boto3 / filesystem), so they run in the threadpool.
"""
import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import FileResponse, Response
from starlette.concurrency import run_in_threadpool

from docstore.api.dependencies import get_storage
from docstore.config import settings
from docstore.schemas.document import (
    DocumentUploadResponse,
    SignedUrlResponse,
    DocumentDeleteResponse,
)
from docstore.storage.base import BytesContent, LocalPathContent
from docstore.storage.errors import (
    StorageError,
    NotFoundError,
    AlreadyExistsError,
    ProviderError,
    InvalidPathError,
)
from docstore.storage.gateway import StorageGateway

logger = logging.getLogger(__name__)

router = APIRouter()

# Common document types accepted for upload
ALLOWED_CONTENT_TYPES = {
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'application/vnd.ms-powerpoint',
    'application/vnd.openxmlformats-officedocument.presentationml.presentation',
    'image/jpeg',
    'image/png',
    'image/gif',
    'text/plain',
    'text/csv',
    'application/zip',
}


def _http_error(e: StorageError) -> HTTPException:
    """Map a storage error to an HTTP error."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    if isinstance(e, AlreadyExistsError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    if isinstance(e, InvalidPathError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if isinstance(e, ProviderError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.post("", response_model=DocumentUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    storage: StorageGateway = Depends(get_storage)
):
    """
    Upload a document.

    The stored name is a fresh UUID with the original extension, so the
    original file name never collides on local storage.
    """
    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File type not allowed: {content_type or 'unknown'}"
        )

    too_large = HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"File exceeds {settings.max_upload_bytes} bytes"
    )
    # Reject on the spooled size before pulling the body into memory
    if file.size is not None and file.size > settings.max_upload_bytes:
        raise too_large

    data = await file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise too_large

    original_name = file.filename or "document"
    stored_name = f"{uuid.uuid4()}{Path(original_name).suffix.lower()}"

    try:
        result = await run_in_threadpool(storage.upload_file, data, stored_name, content_type)
    except StorageError as e:
        raise _http_error(e)

    return DocumentUploadResponse(
        path=result.path,
        url=result.url,
        backend=result.backend,
        file_name=original_name,
        content_type=content_type,
        size_bytes=len(data)
    )


@router.get("/{path:path}/signed-url", response_model=SignedUrlResponse)
async def get_signed_url(
    path: str,
    expires_in: Optional[int] = Query(None, gt=0, description="URL lifetime in seconds"),
    storage: StorageGateway = Depends(get_storage)
):
    """
    Issue a time-limited read URL.

    Returns url=null on local storage; clients then download through
    GET /documents/{path} instead.
    """
    lifetime = expires_in or settings.storage_signed_url_expiration
    try:
        url = await run_in_threadpool(storage.get_signed_url, path, lifetime)
    except StorageError as e:
        raise _http_error(e)

    return SignedUrlResponse(url=url, expires_in=lifetime, backend=storage.backend)


@router.get("/{path:path}")
async def download_document(
    path: str,
    storage: StorageGateway = Depends(get_storage)
):
    """Download a document, from memory (hosted) or streamed from disk (local)."""
    try:
        content = await run_in_threadpool(storage.get_file, path)
    except StorageError as e:
        raise _http_error(e)

    media_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    headers = {"X-Storage-Backend": content.backend.value}

    if isinstance(content, BytesContent):
        return Response(content=content.data, media_type=media_type, headers=headers)
    elif isinstance(content, LocalPathContent):
        return FileResponse(content.path, media_type=media_type, headers=headers)
    else:
        raise TypeError(f"Unhandled file content: {type(content).__name__}")


@router.delete("/{path:path}", response_model=DocumentDeleteResponse)
async def delete_document(
    path: str,
    storage: StorageGateway = Depends(get_storage)
):
    """
    Delete a document.

    Deletion is best-effort: a hosted failure is reported as deleted=false
    rather than an error response.
    """
    try:
        deleted = await run_in_threadpool(storage.delete_file, path)
    except StorageError as e:
        raise _http_error(e)

    if not deleted:
        logger.warning(f"Document {path} could not be removed from {storage.backend.value} storage")

    return DocumentDeleteResponse(deleted=deleted, backend=storage.backend)
