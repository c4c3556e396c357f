"""
Domain Layer - Core building blocks shared by every domain
"""

from marketplace.core.domain.exceptions import (
    DomainException,
    InsufficientStockException,
    InvalidWebhookPayloadException,
)
from marketplace.core.domain.value_objects import StatusEnum

__all__ = [
    # Value Objects
    "StatusEnum",
    # Exceptions
    "DomainException",
    "InsufficientStockException",
    "InvalidWebhookPayloadException",
]
