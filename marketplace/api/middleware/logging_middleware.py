"""
Request logging middleware for FastAPI application.

Logs method, path, status and timing with a correlation ID.
Query strings are never logged (webhook URLs carry a shared secret).
"""

import logging
import re
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    HTTP middleware for request/response logging.

    Adds correlation ID to requests for tracing.
    """

    # Paths to exclude from detailed logging (high-frequency, low-value)
    EXCLUDE_PATHS: tuple[str, ...] = (
        "/health",
        "/favicon.ico",
    )

    def _should_log(self, path: str) -> bool:
        """Check if request should be logged based on path."""
        return not any(path.startswith(exclude) for exclude in self.EXCLUDE_PATHS)

    def _generate_correlation_id(self) -> str:
        """Generate a unique correlation ID for request tracing."""
        return str(uuid.uuid4())[:8]

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        """
        Process request with logging.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response from next handler
        """
        correlation_id = request.headers.get("X-Correlation-ID") or self._generate_correlation_id()
        request.state.correlation_id = correlation_id

        if not self._should_log(request.url.path):
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = correlation_id
            return response

        start_time = time.perf_counter()
        client_ip = self._get_client_ip(request)

        # url.path only: the query string may hold the webhook secret
        logger.info(f"[{correlation_id}] --> {request.method} {request.url.path} from {client_ip}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"[{correlation_id}] <-- {request.method} {request.url.path} ERROR in {duration_ms:.2f}ms: {e}"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"[{correlation_id}] <-- {request.method} {request.url.path} "
            f"{response.status_code} in {duration_ms:.2f}ms",
        )

        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"

        return response

    def _get_client_ip(self, request: Request) -> str:
        """
        Extract client IP from request, considering proxies.

        Checks X-Forwarded-For header for proxied requests.
        """
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"


class SecretQueryRedactingFilter(logging.Filter):
    """
    Masks the value of the 'secret' query parameter in log records.

    Attached to uvicorn's access logger, which prints the full path with
    its query string.
    """

    _SECRET_PATTERN = re.compile(r"(?i)(\bsecret=)[^&\s\"]*")
    REDACTED = "***"

    def _redact(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._SECRET_PATTERN.sub(rf"\g<1>{self.REDACTED}", value)
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._redact(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(self._redact(arg) for arg in record.args)
        elif isinstance(record.args, dict):
            record.args = {key: self._redact(value) for key, value in record.args.items()}
        return True


def install_access_log_redaction(logger_name: str = "uvicorn.access") -> None:
    """Attach SecretQueryRedactingFilter to the access logger once."""
    access_logger = logging.getLogger(logger_name)
    if not any(isinstance(f, SecretQueryRedactingFilter) for f in access_logger.filters):
        access_logger.addFilter(SecretQueryRedactingFilter())
