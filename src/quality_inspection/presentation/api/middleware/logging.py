"""HTTP request/response logging middleware for FastAPI."""

import time
from typing import Callable, Optional, Set
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ....infrastructure.logging import (
    generate_correlation_id,
    set_correlation_id,
    clear_correlation_id,
    get_logger,
    log_request,
    log_response
)

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Headers to exclude from logging (sensitive information)
EXCLUDED_HEADERS = {
    'authorization',
    'cookie',
    'set-cookie',
    'x-api-key',
    'x-auth-token',
    'proxy-authorization'
}

DEFAULT_EXCLUDED_PATHS = {
    '/health',
    '/docs',
    '/redoc',
    '/openapi.json',
    '/favicon.ico'
}


class RequestResponseLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses with correlation IDs."""

    def __init__(
        self,
        app: ASGIApp,
        log_headers: bool = False,
        exclude_paths: Optional[Set[str]] = None
    ):
        """
        Initialize the logging middleware.

        Args:
            app: The ASGI application
            log_headers: Whether to log (sanitized) request headers
            exclude_paths: Set of paths to exclude from logging
        """
        super().__init__(app)
        self.log_headers = log_headers
        self.exclude_paths = DEFAULT_EXCLUDED_PATHS if exclude_paths is None else exclude_paths

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process the request and response with logging."""
        if request.url.path in self.exclude_paths:
            return await call_next(request)

        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        set_correlation_id(correlation_id)
        start_time = time.time()

        try:
            extra = {"client_host": request.client.host if request.client else "unknown"}
            if request.query_params:
                extra["request_query"] = str(request.query_params)
            if self.log_headers:
                extra["request_headers"] = self._sanitize_headers(dict(request.headers))
            log_request(logger, request.method, request.url.path, **extra)

            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000
            response.headers[CORRELATION_HEADER] = correlation_id
            log_response(logger, request.method, request.url.path, response.status_code, duration_ms)
            return response

        except Exception as exc:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                extra={
                    "request_method": request.method,
                    "request_path": request.url.path,
                    "duration_ms": round(duration_ms, 2),
                    "error": str(exc),
                    "error_type": type(exc).__name__
                },
                exc_info=True
            )
            raise

        finally:
            clear_correlation_id()

    def _sanitize_headers(self, headers: dict) -> dict:
        """Remove sensitive headers from logging."""
        return {
            key: "[REDACTED]" if key.lower() in EXCLUDED_HEADERS else value
            for key, value in headers.items()
        }
