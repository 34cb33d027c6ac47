"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- backend
- path
- duration_ms

Usage:
    from docstore.utils.logging import configure_logging, log_storage_operation

    configure_logging('docstore-api', 'INFO')
    log_storage_operation(logger, operation='upload', backend='local', path='a.txt', duration_ms=1.2)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (e.g. docstore-api)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Console handler (for docker logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    backend: Optional[str] = None,
    path: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        backend: Optional storage backend tag
        path: Optional storage path
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if backend:
        extra["backend"] = backend
    if path:
        extra["path"] = path
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


def log_storage_operation(
    logger: logging.Logger,
    operation: str,
    backend: str,
    path: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """
    Log a completed storage operation.

    Args:
        logger: Logger instance
        operation: Operation name (upload, get, delete, sign) (required)
        backend: Backend tag (hosted, local) (required)
        path: Optional storage path
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="storage_operation",
        backend=backend,
        path=path,
        duration_ms=duration_ms,
        operation=operation,
        **kwargs
    )

    logger.info(f"Storage {operation} on {backend}: {path}", extra=extra)


def log_storage_failure(
    logger: logging.Logger,
    operation: str,
    backend: str,
    error: str,
    path: Optional[str] = None,
    duration_ms: Optional[float] = None,
    include_traceback: bool = False,
    **kwargs
):
    """
    Log a failed storage operation.

    Args:
        logger: Logger instance
        operation: Operation name (required)
        backend: Backend tag (required)
        error: Error message (required)
        path: Optional storage path
        duration_ms: Optional duration in milliseconds
        include_traceback: Whether to include stack trace (default: False)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="storage_failure",
        backend=backend,
        path=path,
        duration_ms=duration_ms,
        operation=operation,
        error=str(error),
        **kwargs
    )

    message = f"Storage {operation} failed on {backend}: {error}"

    if include_traceback:
        exc_info = sys.exc_info()
        if exc_info[0] is not None:
            logger.error(message, extra=extra, exc_info=exc_info)
        else:
            logger.error(message, extra=extra)
    else:
        logger.error(message, extra=extra)


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
