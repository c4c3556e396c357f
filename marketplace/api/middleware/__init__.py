"""
Middleware package for FastAPI application.
"""

from marketplace.api.middleware.logging_middleware import (
    RequestLoggingMiddleware,
    SecretQueryRedactingFilter,
    install_access_log_redaction,
)

__all__ = [
    "RequestLoggingMiddleware",
    "SecretQueryRedactingFilter",
    "install_access_log_redaction",
]
