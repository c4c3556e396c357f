"""
Deduct Stock If Needed Use Case

Decrements inventory for a paid order exactly once.
"""

import logging

from marketplace.core.domain import InsufficientStockException
from marketplace.domains.ecommerce.application.dto import StockDeductionResult
from marketplace.domains.ecommerce.application.ports import IInventoryRepository, IOrderRepository

logger = logging.getLogger(__name__)


class DeductStockIfNeededUseCase:
    """
    Use Case: Deduct Stock If Needed

    Responsibilities:
    - Skip orders whose stock was already deducted
    - Claim the order's stock_deducted flag (only if still unset)
    - Conditionally decrement each line item's product stock

    The claim and the decrements share the caller's transaction, so the flag
    is committed iff the decrements are. A concurrent attempt for the same
    order loses the claim and decrements nothing.
    """

    def __init__(self, order_repository: IOrderRepository, inventory_repository: IInventoryRepository):
        """
        Initialize use case with dependencies.

        Args:
            order_repository: Repository for order data access
            inventory_repository: Repository for conditional stock writes
        """
        self.order_repository = order_repository
        self.inventory_repository = inventory_repository

    async def execute(self, order_id: str) -> StockDeductionResult:
        """
        Deduct stock for every line item of the order, at most once.

        Insufficient stock on a line is logged and the pass continues.

        Args:
            order_id: Order ID

        Returns:
            StockDeductionResult describing what was decremented
        """
        result = StockDeductionResult(order_id=order_id)

        order = await self.order_repository.get_by_id(order_id)
        if order is None:
            logger.warning(f"[STOCK] Order {order_id} not found, nothing to deduct")
            result.reason = "order_not_found"
            return result

        if order.stock_deducted:
            logger.info(f"[STOCK] Order {order.order_number} already deducted, skipping")
            result.reason = "already_deducted"
            return result

        claimed = await self.inventory_repository.claim_stock_deduction(order.id)
        if not claimed:
            logger.info(f"[STOCK] Order {order.order_number} claimed by a concurrent attempt, skipping")
            result.reason = "already_deducted"
            return result

        for item in order.items:
            line = {"product_id": item.product_id, "quantity": item.quantity}

            if not item.is_deductible():
                result.skipped.append(line)
                continue

            if await self.inventory_repository.decrement_stock(item.product_id, item.quantity):
                result.deducted.append(line)
                logger.debug(f"[STOCK] -{item.quantity} {item.product_name} ({item.product_id})")
            else:
                warning = InsufficientStockException(item.product_id, item.quantity)
                logger.warning(f"[STOCK] {warning.message} (order {order.order_number})")
                result.failed.append(warning.details)

        result.performed = True
        logger.info(
            f"[STOCK] Order {order.order_number}: {len(result.deducted)} deducted, "
            f"{len(result.failed)} failed, {len(result.skipped)} skipped"
        )
        return result
