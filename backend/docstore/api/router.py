"""
API router aggregator.
Includes all route modules.
"""
from fastapi import APIRouter
from docstore.api import health, documents

api_router = APIRouter()

# Include route modules
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
