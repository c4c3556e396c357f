"""
E-commerce Domain Layer

Domain-Driven Design implementation for the e-commerce bounded context.

This module contains:
- Entities: Business objects with identity (Order, OrderItem)
- Value Objects: Immutable domain primitives (OrderStatus, PaymentStatus)
- Domain Services: Payment-driven transition rules (PaymentStatusPolicy)
"""

from marketplace.domains.ecommerce.domain.entities import Order, OrderItem
from marketplace.domains.ecommerce.domain.services import (
    MerchantOrderClassification,
    PaymentStatusPolicy,
    StatusTransition,
)
from marketplace.domains.ecommerce.domain.value_objects import (
    GatewayPaymentStatus,
    OrderStatus,
    PaymentStatus,
)

__all__ = [
    # Entities
    "Order",
    "OrderItem",
    # Value Objects
    "OrderStatus",
    "PaymentStatus",
    "GatewayPaymentStatus",
    # Services
    "PaymentStatusPolicy",
    "StatusTransition",
    "MerchantOrderClassification",
]
