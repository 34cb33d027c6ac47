"""
ASGI middleware for tracking HTTP request metrics.
Records request count, duration, and errors.
"""
import re
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from docstore.utils.metrics import http_requests_total, http_request_duration_seconds, errors_total

# Document paths are arbitrary storage keys; collapse them to one label
_DOCUMENT_SIGNED_URL = re.compile(r'^/api/documents/.+/signed-url$')
_DOCUMENT_PATH = re.compile(r'^/api/documents/.+$')


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP metrics for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        """Process request and record metrics."""
        if request.url.path == "/metrics":
            return await call_next(request)

        started = time.perf_counter()
        method = request.method
        path = self.normalize_path(request.url.path)

        try:
            response = await call_next(request)
        except Exception:
            errors_total.labels(error_type="exception").inc()
            raise

        http_requests_total.labels(method=method, path=path, status=response.status_code).inc()
        http_request_duration_seconds.labels(method=method, path=path).observe(
            time.perf_counter() - started
        )

        if response.status_code >= 400:
            errors_total.labels(error_type=f"{response.status_code // 100}xx").inc()

        return response

    @staticmethod
    def normalize_path(path: str) -> str:
        """Replace storage keys in document routes with placeholders."""
        if _DOCUMENT_SIGNED_URL.match(path):
            return "/api/documents/{path}/signed-url"
        if _DOCUMENT_PATH.match(path):
            return "/api/documents/{path}"
        return path
