"""
Domain Exceptions

These exceptions represent business rule violations and domain-specific errors.
They should be caught and translated to appropriate HTTP responses in the API layer.
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    Provides a standardized way to communicate business rule violations.
    """

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "INSUFFICIENT_STOCK")
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}


class InsufficientStockException(DomainException):
    """Raised (or reported) when there's not enough stock for a line item."""

    def __init__(self, product_id: str | None, requested: int):
        self.product_id = product_id
        self.requested = requested
        super().__init__(
            f"Insufficient stock or missing product {product_id}. Requested: {requested}",
            "INSUFFICIENT_STOCK",
            {
                "product_id": product_id,
                "requested": requested,
            },
        )


class InvalidWebhookPayloadException(DomainException):
    """Raised when a webhook notification carries no usable identifier."""

    def __init__(self, message: str, topic: str | None = None):
        self.topic = topic
        super().__init__(message, "INVALID_WEBHOOK_PAYLOAD", {"topic": topic})
