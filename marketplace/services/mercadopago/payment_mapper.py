"""
Payment data extraction utilities for Mercado Pago webhooks.

Builds the order's payment snapshot from provider responses,
handling multiple possible data locations and formats.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)


class MercadoPagoPaymentMapper:
    """Extracts and normalizes data from MP payment and merchant-order responses."""

    @staticmethod
    def extract_external_reference(resource: dict[str, Any]) -> str | None:
        """
        Extract the external reference (our order ID or order number).

        Args:
            resource: MP payment or merchant order dictionary

        Returns:
            Reference string or None if absent/blank
        """
        ref = resource.get("external_reference")
        if ref is None:
            return None
        ref = str(ref).strip()
        return ref or None

    @staticmethod
    def extract_payment_method(payment: dict[str, Any]) -> str | None:
        """
        Extract the payment method.

        Tries:
        1. payment_method_id (e.g. "visa", "account_money")
        2. payment_type_id (e.g. "credit_card") as fallback
        """
        method = payment.get("payment_method_id") or payment.get("payment_type_id")
        return str(method) if method else None

    @staticmethod
    def extract_net_received_amount(payment: dict[str, Any]) -> float | None:
        """
        Extract the net amount credited to the seller.

        Lives under transaction_details in current API versions,
        at the top level in older responses.
        """
        details = payment.get("transaction_details") or {}
        amount = details.get("net_received_amount")
        if amount is None:
            amount = payment.get("net_received_amount")
        return amount

    @staticmethod
    def build_payment_snapshot(
        payment: dict[str, Any],
        gateway_payment_id: str,
        payment_status: str,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Build the order's payment_details snapshot for a payment.

        Status-specific fields: paid_at on approval, failure_reason on
        rejection, refunded_at on refund.

        Args:
            payment: MP payment response dictionary
            gateway_payment_id: Resolved payment ID (the response id, else the notified id)
            payment_status: Mapped payment status of the order
            now: Processing time (defaults to current UTC time)

        Returns:
            JSON-serializable snapshot dictionary
        """
        now = now or datetime.now(UTC)
        snapshot: dict[str, Any] = {
            "mercado_pago_id": gateway_payment_id,
            "status": payment.get("status"),
            "status_detail": payment.get("status_detail"),
            "payment_method": MercadoPagoPaymentMapper.extract_payment_method(payment),
            "transaction_amount": payment.get("transaction_amount"),
        }

        net_received = MercadoPagoPaymentMapper.extract_net_received_amount(payment)
        if net_received is not None:
            snapshot["net_received_amount"] = net_received

        if payment_status == "approved":
            snapshot["paid_at"] = payment.get("date_approved") or now.isoformat()
        elif payment_status == "rejected":
            snapshot["failure_reason"] = payment.get("status_detail")
        elif payment_status == "refunded":
            snapshot["refunded_at"] = now.isoformat()

        return snapshot

    @staticmethod
    def build_merchant_order_snapshot(
        merchant_order_id: str,
        classified_status: str,
        payment_id: str | None,
        payment_status: str,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Build the order's payment_details snapshot for a merchant order.

        Args:
            merchant_order_id: MP merchant order ID
            classified_status: Aggregate status derived from attached payments
            payment_id: ID of the payment that decided the aggregate status
            payment_status: Mapped payment status of the order
            now: Processing time (defaults to current UTC time)
        """
        now = now or datetime.now(UTC)
        snapshot: dict[str, Any] = {
            "merchant_order_id": str(merchant_order_id),
            "status": classified_status,
        }
        if payment_id:
            snapshot["mercado_pago_id"] = payment_id
        if payment_status == "approved":
            snapshot["paid_at"] = now.isoformat()
        elif payment_status == "refunded":
            snapshot["refunded_at"] = now.isoformat()
        return snapshot
