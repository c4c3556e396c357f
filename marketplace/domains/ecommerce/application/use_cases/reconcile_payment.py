"""
Reconcile Payment Use Case

Maps a Mercado Pago payment onto its order.
"""

import logging

from marketplace.domains.ecommerce.application.dto import ReconciliationResult
from marketplace.services.mercadopago.payment_mapper import MercadoPagoPaymentMapper

from .base_reconciliation import PROCESSED_MESSAGE, BaseReconciliationUseCase

logger = logging.getLogger(__name__)


class ReconcilePaymentUseCase(BaseReconciliationUseCase):
    """
    Use Case: Reconcile Payment

    Responsibilities:
    - Re-fetch the authoritative payment from the gateway
    - Resolve the order by correlation fields or external reference
    - Map the payment status and persist the snapshot
    - Deduct stock on approval (idempotent) and flag a new approval for notification

    Gateway errors propagate so the provider retries the delivery.
    """

    async def execute(self, payment_id: str) -> ReconciliationResult:
        """
        Reconcile one payment.

        Args:
            payment_id: Gateway payment ID taken from the notification

        Returns:
            ReconciliationResult (ignored with a reason when nothing applies)
        """
        payment = await self.gateway.get_payment(payment_id)
        gateway_payment_id = str(payment.get("id") or payment_id)
        raw_status = payment.get("status")
        logger.info(f"[MP-WEBHOOK] Payment {gateway_payment_id} status: {raw_status} ({payment.get('status_detail')})")

        external_reference = MercadoPagoPaymentMapper.extract_external_reference(payment)
        order = await self.order_repository.find_by_payment_reference(gateway_payment_id, external_reference)

        if order is None:
            logger.warning(
                f"[MP-WEBHOOK] Order not found for payment {gateway_payment_id} "
                f"(external_reference={external_reference})"
            )
            return ReconciliationResult(
                message=PROCESSED_MESSAGE,
                payment_id=gateway_payment_id,
                ignored=True,
                reason="order_not_found",
            )

        result = ReconciliationResult(
            message=PROCESSED_MESSAGE,
            order_id=order.id,
            order_number=order.order_number,
            payment_id=gateway_payment_id,
        )

        transition = self.policy.map_gateway_status(raw_status)
        if transition is None:
            logger.warning(f"[MP-WEBHOOK] Unknown payment status: {raw_status} for payment {gateway_payment_id}")
            result.ignored = True
            result.reason = "unknown_status"
            return result

        snapshot = MercadoPagoPaymentMapper.build_payment_snapshot(
            payment, gateway_payment_id, transition.payment_status.value
        )
        return await self._apply_transition(order, transition, snapshot, gateway_payment_id, result)
