"""
E-commerce Domain Value Objects

Immutable value objects for the e-commerce domain.
"""

from marketplace.domains.ecommerce.domain.value_objects.order_status import (
    GatewayPaymentStatus,
    OrderStatus,
    PaymentStatus,
)

__all__ = [
    "OrderStatus",
    "PaymentStatus",
    "GatewayPaymentStatus",
]
