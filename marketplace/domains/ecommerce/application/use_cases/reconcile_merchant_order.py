"""
Reconcile Merchant Order Use Case

Maps a Mercado Pago merchant order (several payment attempts) onto its order.
"""

import logging

from marketplace.domains.ecommerce.application.dto import ReconciliationResult
from marketplace.services.mercadopago.payment_mapper import MercadoPagoPaymentMapper

from .base_reconciliation import MERCHANT_ORDER_PROCESSED_MESSAGE, BaseReconciliationUseCase

logger = logging.getLogger(__name__)


class ReconcileMerchantOrderUseCase(BaseReconciliationUseCase):
    """
    Use Case: Reconcile Merchant Order

    Responsibilities:
    - Re-fetch the authoritative merchant order from the gateway
    - Resolve the order by external reference, else by preference ID
    - Classify the attached payments and apply the winning status
    """

    async def execute(self, merchant_order_id: str) -> ReconciliationResult:
        """
        Reconcile one merchant order.

        Args:
            merchant_order_id: Gateway merchant order ID

        Returns:
            ReconciliationResult (ignored with a reason when nothing applies)
        """
        merchant_order = await self.gateway.get_merchant_order(merchant_order_id)
        merchant_order_id = str(merchant_order.get("id") or merchant_order_id)

        external_reference = MercadoPagoPaymentMapper.extract_external_reference(merchant_order)
        preference_id = merchant_order.get("preference_id")
        order = await self.order_repository.find_by_merchant_order(
            external_reference, str(preference_id) if preference_id else None
        )

        if order is None:
            logger.warning(
                f"[MP-WEBHOOK] Order not found for merchant_order {merchant_order_id} "
                f"(external_reference={external_reference}, preference_id={preference_id})"
            )
            return ReconciliationResult(
                message=MERCHANT_ORDER_PROCESSED_MESSAGE,
                merchant_order_id=merchant_order_id,
                ignored=True,
                reason="order_not_found",
            )

        classification = self.policy.classify_merchant_order(merchant_order.get("payments") or [])
        transition = self.policy.map_gateway_status(classification.gateway_status.value)
        logger.info(
            f"[MP-WEBHOOK] Merchant order {merchant_order_id} classified as "
            f"{classification.gateway_status.value} (payment {classification.payment_id})"
        )

        result = ReconciliationResult(
            message=MERCHANT_ORDER_PROCESSED_MESSAGE,
            order_id=order.id,
            order_number=order.order_number,
            merchant_order_id=merchant_order_id,
            payment_id=classification.payment_id,
        )

        snapshot = MercadoPagoPaymentMapper.build_merchant_order_snapshot(
            merchant_order_id,
            classification.gateway_status.value,
            classification.payment_id,
            transition.payment_status.value,
        )
        return await self._apply_transition(order, transition, snapshot, classification.payment_id, result)
