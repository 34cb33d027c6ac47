"""
FastAPI dependencies for the storage gateway.
Provides get_storage dependency returning the gateway built at startup.
"""
from fastapi import HTTPException, Request, status

from docstore.storage.gateway import StorageGateway


def get_storage(request: Request) -> StorageGateway:
    """
    FastAPI dependency returning the process-wide storage gateway.

    The gateway is built once in the application lifespan and stored on
    app.state; tests override this dependency to inject their own.

    Raises:
        HTTPException 503: If the gateway was never initialized
    """
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage service not initialized"
        )
    return storage
