"""
Database models package - Organized by responsibility
"""

from .base import Base, JSONType, TimestampMixin
from .catalog import Product
from .customers import Customer
from .orders import Order, OrderItem
from .payment_log import PaymentLog

__all__ = [
    "Base",
    "JSONType",
    "TimestampMixin",
    "Customer",
    "Product",
    "Order",
    "OrderItem",
    "PaymentLog",
]
