"""
Notify Payment Approved Use Case

Sends the customer e-mail for an approval that has been committed.
"""

import logging

from marketplace.domains.ecommerce.application.dto import ReconciliationResult
from marketplace.domains.ecommerce.application.ports import IPaymentNotifier

logger = logging.getLogger(__name__)


class NotifyPaymentApprovedUseCase:
    """
    Use Case: Notify Payment Approved

    Runs after the reconciliation transaction commits, so a rolled back
    approval never reaches the customer and no row lock is held while the
    e-mail provider is called. Best-effort: failures are logged, never raised.
    """

    def __init__(self, notifier: IPaymentNotifier):
        self.notifier = notifier

    async def execute(self, result: ReconciliationResult) -> bool:
        """
        E-mail the customer if the result carries a committed approval.

        Args:
            result: Reconciliation result returned before the commit

        Returns:
            True if the e-mail was sent; also recorded on result.email_sent
        """
        order = result.approved_order
        if not result.became_approved or order is None:
            return False

        if not order.customer_email:
            logger.info(f"[PAYMENT-EMAIL] Order {order.order_number} has no customer e-mail, skipping")
            return False

        try:
            outcome = await self.notifier.send_payment_approved_email(
                customer_email=order.customer_email,
                order_number=order.order_number,
                payment_id=result.payment_id or order.gateway_payment_id or order.mercado_pago_id,
            )
        except Exception as e:
            logger.warning(f"[PAYMENT-EMAIL] Could not send payment approved e-mail: {e}")
            return False

        result.email_sent = bool(outcome and outcome.get("success"))
        return result.email_sent
