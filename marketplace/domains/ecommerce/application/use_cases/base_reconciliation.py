"""
Shared reconciliation steps for payment and merchant-order notifications.
"""

import logging

from marketplace.domains.ecommerce.application.dto import ReconciliationResult
from marketplace.domains.ecommerce.application.ports import (
    IInventoryRepository,
    IOrderRepository,
    IPaymentGateway,
)
from marketplace.domains.ecommerce.domain.entities.order import Order
from marketplace.domains.ecommerce.domain.services import PaymentStatusPolicy, StatusTransition

from .deduct_stock import DeductStockIfNeededUseCase

logger = logging.getLogger(__name__)

PROCESSED_MESSAGE = "Webhook processed successfully"
MERCHANT_ORDER_PROCESSED_MESSAGE = "Merchant order processed"


class BaseReconciliationUseCase:
    """
    Applies a resolved status transition to an order.

    Subclasses fetch the authoritative gateway object, resolve the order,
    and delegate here to persist state and deduct stock. Customer
    notification is left to the caller, after the transaction commits.
    """

    def __init__(
        self,
        gateway: IPaymentGateway,
        order_repository: IOrderRepository,
        inventory_repository: IInventoryRepository,
        policy: PaymentStatusPolicy | None = None,
    ):
        self.gateway = gateway
        self.order_repository = order_repository
        self.policy = policy or PaymentStatusPolicy()
        self.deduct_stock = DeductStockIfNeededUseCase(order_repository, inventory_repository)

    async def _apply_transition(
        self,
        order: Order,
        transition: StatusTransition,
        payment_details: dict,
        gateway_payment_id: str | None,
        result: ReconciliationResult,
    ) -> ReconciliationResult:
        if self.policy.is_superseded(order, transition, gateway_payment_id):
            logger.info(
                f"[MP-WEBHOOK] Order {order.order_number} already approved by payment "
                f"{order.gateway_payment_id}; ignoring {transition.gateway_status.value} "
                f"for payment {gateway_payment_id}"
            )
            result.ignored = True
            result.reason = "superseded_by_approved_payment"
            result.payment_status = order.payment_status.value
            result.order_status = order.status.value
            return result

        order_status = transition.order_status.value if transition.order_status else None
        became_approved = await self.order_repository.apply_payment_state(
            order.id,
            payment_status=transition.payment_status.value,
            order_status=order_status,
            payment_details=payment_details,
        )

        result.payment_status = transition.payment_status.value
        result.order_status = order_status or order.status.value
        logger.info(
            f"[MP-WEBHOOK] Order {order.order_number} -> payment={result.payment_status}, "
            f"status={result.order_status}"
        )

        if transition.deduct_stock:
            result.stock = await self.deduct_stock.execute(order.id)

        if became_approved:
            result.became_approved = True
            result.approved_order = order

        return result
