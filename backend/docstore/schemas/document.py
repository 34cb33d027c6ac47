"""
Pydantic schemas for document endpoints.
"""
from pydantic import BaseModel, Field
from typing import Optional

from docstore.storage.base import StorageBackend


class DocumentUploadResponse(BaseModel):
    """Response schema for a stored document."""
    path: str = Field(..., description="Storage path used for later fetch/delete")
    url: Optional[str] = Field(None, description="Direct public URL, if the backend has one")
    backend: StorageBackend = Field(..., description="Backend that stored the file")
    file_name: str = Field(..., description="Original display name")
    content_type: str = Field(..., description="Declared MIME type")
    size_bytes: int = Field(..., description="File size in bytes")

    class Config:
        json_schema_extra = {
            "example": {
                "path": "uploads/1718000000000-3f6c1e2a.pdf",
                "url": None,
                "backend": "hosted",
                "file_name": "Q2 report.pdf",
                "content_type": "application/pdf",
                "size_bytes": 1048576
            }
        }


class SignedUrlResponse(BaseModel):
    """Response schema for signed URL issuance."""
    url: Optional[str] = Field(None, description="Signed URL, null on local storage")
    expires_in: int = Field(..., description="URL lifetime in seconds")
    backend: StorageBackend


class DocumentDeleteResponse(BaseModel):
    """Response schema for document deletion."""
    deleted: bool = Field(..., description="False if the backend failed to remove the file")
    backend: StorageBackend
