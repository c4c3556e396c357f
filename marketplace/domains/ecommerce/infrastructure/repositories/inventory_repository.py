"""
Inventory Repository Implementation

Atomic conditional writes for stock deduction.
"""

import logging
import uuid

from sqlalchemy import false, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.domains.ecommerce.application.ports import IInventoryRepository
from marketplace.models.db.catalog import Product as ProductModel
from marketplace.models.db.orders import Order as OrderModel

logger = logging.getLogger(__name__)


class SQLAlchemyInventoryRepository(IInventoryRepository):
    """
    SQLAlchemy implementation of inventory adjustments.

    Each method is a single UPDATE conditioned on the previous value,
    so concurrent deliveries cannot double-decrement or go negative.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def claim_stock_deduction(self, order_id: str) -> bool:
        """Set stock_deducted on the order only if it is still false."""
        result = await self.session.execute(
            update(OrderModel)
            .where(OrderModel.id == uuid.UUID(str(order_id)), OrderModel.stock_deducted == false())
            .values(stock_deducted=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Decrement stock and available quantity if stock >= quantity."""
        try:
            product_uuid = uuid.UUID(str(product_id))
        except ValueError:
            logger.warning(f"[STOCK] Invalid product_id format: {product_id}")
            return False

        result = await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_uuid, ProductModel.stock >= quantity)
            .values(
                stock=ProductModel.stock - quantity,
                available_quantity=ProductModel.available_quantity - quantity,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
