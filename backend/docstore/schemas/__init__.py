"""
Pydantic schemas for API request/response validation.
"""
from docstore.schemas.document import (
    DocumentUploadResponse,
    SignedUrlResponse,
    DocumentDeleteResponse,
)

__all__ = [
    "DocumentUploadResponse",
    "SignedUrlResponse",
    "DocumentDeleteResponse",
]
