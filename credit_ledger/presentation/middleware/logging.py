"""Request/response logging middleware with timing and HTTP metrics."""

import time
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from credit_ledger.core.config import settings
from credit_ledger.core.metrics import record_http_request

logger = structlog.get_logger(__name__)


def _route_template(request: Request) -> str:
    """
    Full route path with placeholders, keeping metric label cardinality low.

    A route matched inside an included router may only carry its own path,
    so the mount prefix is taken from the leading segments of the request path.
    """
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    if not template:
        return request.url.path

    segments = request.url.path.rstrip("/").split("/")
    depth = template.rstrip("/").count("/")
    prefix = "/".join(segments[: max(len(segments) - depth, 0)])
    return prefix + template


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs request start, completion, and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        log = logger.bind(method=method, path=path)
        log.info("request_started")

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            log.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration * 1000, 2),
            )
            raise

        duration = time.perf_counter() - start_time
        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        if settings.metrics_enabled:
            record_http_request(method, _route_template(request), response.status_code, duration)

        return response
