"""
Process Webhook Notification Use Case

Routes a normalized notification to the matching reconciliation.
"""

import logging

from marketplace.core.domain import InvalidWebhookPayloadException
from marketplace.domains.ecommerce.application.dto import ReconciliationResult, WebhookNotification
from marketplace.domains.ecommerce.application.ports import (
    IInventoryRepository,
    IOrderRepository,
    IPaymentGateway,
    IPaymentNotifier,
)
from marketplace.domains.ecommerce.domain.services import PaymentStatusPolicy

from .notify_payment_approved import NotifyPaymentApprovedUseCase
from .reconcile_merchant_order import ReconcileMerchantOrderUseCase
from .reconcile_payment import ReconcilePaymentUseCase

logger = logging.getLogger(__name__)


class ProcessWebhookNotificationUseCase:
    """
    Use Case: Process Webhook Notification

    - absent topic or "payment" -> payment reconciliation
    - "merchant_order" -> merchant order reconciliation
    - any other topic (e.g. chargebacks) -> acknowledged and ignored
    """

    def __init__(
        self,
        gateway: IPaymentGateway,
        order_repository: IOrderRepository,
        inventory_repository: IInventoryRepository,
        notifier: IPaymentNotifier,
    ):
        policy = PaymentStatusPolicy()
        self.payments = ReconcilePaymentUseCase(gateway, order_repository, inventory_repository, policy)
        self.merchant_orders = ReconcileMerchantOrderUseCase(gateway, order_repository, inventory_repository, policy)
        self.notify_payment_approved = NotifyPaymentApprovedUseCase(notifier)

    async def notify_after_commit(self, result: ReconciliationResult) -> bool:
        """E-mail the customer for an approval made by this run. Call only after commit."""
        return await self.notify_payment_approved.execute(result)

    async def execute(self, notification: WebhookNotification) -> ReconciliationResult:
        """
        Reconcile the notification.

        Raises:
            InvalidWebhookPayloadException: payment or merchant order topic without an ID
        """
        if notification.is_merchant_order:
            if not notification.resource_id:
                raise InvalidWebhookPayloadException("No merchant_order id", notification.topic)
            return await self.merchant_orders.execute(notification.resource_id)

        if not notification.is_payment:
            logger.info(
                f"[MP-WEBHOOK] Ignored non-payment topic: {notification.topic} id: {notification.resource_id}"
            )
            return ReconciliationResult(
                message="Ignored non-payment topic",
                topic=notification.topic,
                ignored=True,
                reason="unsupported_topic",
            )

        if not notification.resource_id:
            raise InvalidWebhookPayloadException("No payment id", notification.topic)
        return await self.payments.execute(notification.resource_id)
