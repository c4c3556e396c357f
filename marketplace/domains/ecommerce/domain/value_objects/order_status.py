"""
Order Status Value Objects for E-commerce Domain

Represents the lifecycle states of an order and of its payment.
"""

from marketplace.core.domain import StatusEnum


class OrderStatus(StatusEnum):
    """
    Order lifecycle states.

    Payment-driven transitions:
    - PENDING -> CONFIRMED (payment approved)
    - any -> CANCELLED (payment rejected or cancelled)
    - any -> REFUNDED (payment refunded)

    Fulfillment (CONFIRMED -> PROCESSING -> SHIPPED -> DELIVERED) is driven
    by admin actions outside of payment reconciliation.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(StatusEnum):
    """Payment status for orders."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class GatewayPaymentStatus(StatusEnum):
    """Raw payment statuses reported by Mercado Pago that this system models."""

    APPROVED = "approved"
    PENDING = "pending"
    IN_PROCESS = "in_process"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
