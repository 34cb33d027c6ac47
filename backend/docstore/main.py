"""
FastAPI application entry point.
Sets up the API with lifespan events for storage initialization.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from docstore.config import settings
from docstore.api.router import api_router
from docstore.middleware.metrics_middleware import MetricsMiddleware
from docstore.storage.gateway import build_storage_gateway
from docstore.utils.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: Configure logging and select the storage backend (once)
    - Shutdown: Nothing to release
    """
    configure_logging('docstore-api', settings.log_level)

    # Backend selection happens exactly once per process
    app.state.storage = build_storage_gateway(settings)
    logger.info(
        "Storage gateway ready",
        extra={"event": "storage_ready", "backend": app.state.storage.backend.value}
    )

    yield


# Create FastAPI app
app = FastAPI(
    title="Docstore API",
    description="Document storage backend (hosted object storage or local disk)",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware (must be after CORS to track all requests)
app.add_middleware(MetricsMiddleware)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Docstore API",
        "version": "0.1.0",
        "environment": settings.environment
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
