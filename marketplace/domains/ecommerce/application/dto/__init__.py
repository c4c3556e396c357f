"""
Ecommerce Application DTOs

Data Transfer Objects for payment reconciliation.
"""

from dataclasses import dataclass, field
from typing import Any

from marketplace.domains.ecommerce.domain.entities.order import Order

# ==================== Notification DTOs ====================

PAYMENT_TOPIC = "payment"
MERCHANT_ORDER_TOPIC = "merchant_order"


@dataclass(frozen=True)
class WebhookNotification:
    """Normalized gateway notification: which remote object to re-fetch"""

    resource_id: str | None
    topic: str | None = None

    @property
    def is_payment(self) -> bool:
        return not self.topic or self.topic == PAYMENT_TOPIC

    @property
    def is_merchant_order(self) -> bool:
        return self.topic == MERCHANT_ORDER_TOPIC

    def to_dict(self) -> dict[str, Any]:
        return {"resource_id": self.resource_id, "topic": self.topic}


# ==================== Stock DTOs ====================


@dataclass
class StockDeductionResult:
    """Outcome of a deduction pass for one order"""

    order_id: str
    performed: bool = False
    reason: str | None = None
    deducted: list[dict[str, Any]] = field(default_factory=list)
    failed: list[dict[str, Any]] = field(default_factory=list)
    skipped: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"performed": self.performed}
        if self.reason:
            data["reason"] = self.reason
        if self.performed:
            data["deducted"] = len(self.deducted)
            data["failed"] = self.failed
        return data


# ==================== Reconciliation DTOs ====================


@dataclass
class ReconciliationResult:
    """Outcome of reconciling one notification, rendered as the webhook response"""

    message: str
    order_id: str | None = None
    order_number: str | None = None
    payment_id: str | None = None
    merchant_order_id: str | None = None
    payment_status: str | None = None
    order_status: str | None = None
    ignored: bool = False
    reason: str | None = None
    topic: str | None = None
    email_sent: bool = False
    stock: StockDeductionResult | None = None
    # Set when this run moved payment_status to approved; notify only after commit
    became_approved: bool = False
    approved_order: Order | None = field(default=None, repr=False)

    @property
    def reference_id(self) -> str | None:
        return self.payment_id or self.merchant_order_id

    def to_response(self) -> dict[str, Any]:
        """Render as JSON-ready dict, omitting empty fields"""
        response: dict[str, Any] = {
            "message": self.message,
            "orderId": self.order_id,
            "orderNumber": self.order_number,
            "paymentId": self.payment_id,
            "merchantOrderId": self.merchant_order_id,
            "paymentStatus": self.payment_status,
            "orderStatus": self.order_status,
            "reason": self.reason,
            "topic": self.topic,
        }
        response = {k: v for k, v in response.items() if v is not None}
        if self.ignored:
            response["ignored"] = True
        if self.stock is not None:
            response["stock"] = self.stock.to_dict()
        if self.email_sent:
            response["emailSent"] = True
        return response


__all__ = [
    "PAYMENT_TOPIC",
    "MERCHANT_ORDER_TOPIC",
    "WebhookNotification",
    "StockDeductionResult",
    "ReconciliationResult",
]
