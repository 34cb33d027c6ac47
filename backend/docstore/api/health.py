"""
Health check endpoint.
Reports the active storage backend and, for local storage, that the
upload directory is present.
"""
from fastapi import APIRouter, Depends, HTTPException

from docstore.api.dependencies import get_storage
from docstore.storage.gateway import StorageGateway
from docstore.storage.local import LocalStore

router = APIRouter()


@router.get("")
async def health_check(storage: StorageGateway = Depends(get_storage)):
    """
    Health check endpoint.
    Returns the active storage backend and its status.
    """
    health_status = {
        "status": "healthy",
        "storage": storage.backend.value,
    }

    store = storage.store
    if isinstance(store, LocalStore) and not store.root.is_dir():
        health_status["status"] = "unhealthy"
        health_status["error"] = f"upload directory missing: {store.root}"
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
