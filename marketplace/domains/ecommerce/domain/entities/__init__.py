"""
E-commerce Domain Entities
"""

from marketplace.domains.ecommerce.domain.entities.order import Order, OrderItem

__all__ = [
    "Order",
    "OrderItem",
]
