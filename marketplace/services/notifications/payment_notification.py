"""
Payment Notification Service

Sends the "payment approved" e-mail to the customer through Resend.
Best-effort: every failure is logged and reported in the result dict.
"""

from __future__ import annotations

import html
import logging
from typing import Any

from marketplace.clients.resend_client import EmailDeliveryError, ResendEmailClient
from marketplace.config.settings import get_settings

logger = logging.getLogger(__name__)


class PaymentNotificationService:
    """
    Service for sending payment confirmation notifications.

    Implements the payment notifier port. Never raises.
    """

    def __init__(self, email_client: ResendEmailClient | None = None, app_base_url: str | None = None):
        """
        Initialize the payment notification service.

        Args:
            email_client: Resend client (creates one from settings if None)
            app_base_url: Storefront URL linked from the e-mail
        """
        settings = get_settings()
        self._email_client = email_client or ResendEmailClient()
        self.app_base_url = (app_base_url or settings.APP_BASE_URL).rstrip("/")

    async def send_payment_approved_email(
        self,
        customer_email: str,
        order_number: str,
        payment_id: str | None,
    ) -> dict[str, Any]:
        """
        Send the payment approved e-mail.

        Args:
            customer_email: Recipient address
            order_number: Human-readable order number
            payment_id: Gateway payment ID shown in the message

        Returns:
            Dict with success/skipped status and details
        """
        if not self._email_client.is_configured:
            logger.info(f"[PAYMENT-EMAIL] RESEND_API_KEY not set, skipping e-mail for order {order_number}")
            return {"success": False, "skipped": True}

        subject = f"Pago aprobado - Pedido {order_number}"
        body = self._render_payment_approved(order_number, payment_id)

        try:
            async with self._email_client as client:
                response = await client.send_email(to=customer_email, subject=subject, html=body)
        except EmailDeliveryError as e:
            logger.warning(f"[PAYMENT-EMAIL] Failed to send e-mail for order {order_number}: {e}")
            return {"success": False, "skipped": False, "error": str(e)}

        logger.info(f"[PAYMENT-EMAIL] Sent payment approved e-mail for order {order_number}")
        return {"success": True, "skipped": False, "id": response.get("id")}

    def _render_payment_approved(self, order_number: str, payment_id: str | None) -> str:
        order = html.escape(str(order_number))
        payment = html.escape(str(payment_id or "-"))
        orders_url = html.escape(f"{self.app_base_url}/orders")
        return (
            "<div style=\"font-family: Arial, sans-serif\">"
            "<h2>¡Tu pago fue aprobado!</h2>"
            f"<p>Recibimos el pago de tu pedido <strong>{order}</strong>.</p>"
            f"<p>ID de pago: {payment}</p>"
            f"<p>Podés seguir el estado de tu pedido en <a href=\"{orders_url}\">{orders_url}</a>.</p>"
            "</div>"
        )
