"""
E-commerce Infrastructure Repositories

Repository implementations for data access.
All repositories implement the ports in marketplace.domains.ecommerce.application.ports
"""

from .inventory_repository import SQLAlchemyInventoryRepository
from .order_repository import SQLAlchemyOrderRepository
from .payment_log_repository import SQLAlchemyPaymentLogRepository

__all__ = [
    "SQLAlchemyOrderRepository",
    "SQLAlchemyInventoryRepository",
    "SQLAlchemyPaymentLogRepository",
]
