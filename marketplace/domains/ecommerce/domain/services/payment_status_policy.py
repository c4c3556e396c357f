"""
Payment Status Policy for E-commerce Domain

Domain service that maps gateway payment outcomes onto order state.
Pure logic: no I/O, no persistence.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ..entities.order import Order
from ..value_objects.order_status import GatewayPaymentStatus, OrderStatus, PaymentStatus


@dataclass(frozen=True)
class StatusTransition:
    """Target state for an order given a gateway payment status."""

    gateway_status: GatewayPaymentStatus
    payment_status: PaymentStatus
    order_status: OrderStatus | None  # None leaves the order status unchanged
    deduct_stock: bool = False


@dataclass(frozen=True)
class MerchantOrderClassification:
    """Aggregate status of a merchant order and the payment that decided it."""

    gateway_status: GatewayPaymentStatus
    payment_id: str | None


class PaymentStatusPolicy:
    """
    Domain service for payment-driven order transitions.

    Handles:
    - Raw gateway status -> (payment status, order status, stock deduction)
    - Aggregate classification of merchant orders with several payments
    - Detection of stale outcomes for payments superseded by an approval

    Example:
        ```python
        policy = PaymentStatusPolicy()
        transition = policy.map_gateway_status("approved")
        transition.order_status  # OrderStatus.CONFIRMED
        ```
    """

    _TRANSITIONS: dict[GatewayPaymentStatus, StatusTransition] = {
        GatewayPaymentStatus.APPROVED: StatusTransition(
            GatewayPaymentStatus.APPROVED, PaymentStatus.APPROVED, OrderStatus.CONFIRMED, deduct_stock=True
        ),
        GatewayPaymentStatus.PENDING: StatusTransition(
            GatewayPaymentStatus.PENDING, PaymentStatus.PENDING, None
        ),
        GatewayPaymentStatus.IN_PROCESS: StatusTransition(
            GatewayPaymentStatus.IN_PROCESS, PaymentStatus.PENDING, None
        ),
        GatewayPaymentStatus.REJECTED: StatusTransition(
            GatewayPaymentStatus.REJECTED, PaymentStatus.REJECTED, OrderStatus.CANCELLED
        ),
        GatewayPaymentStatus.CANCELLED: StatusTransition(
            GatewayPaymentStatus.CANCELLED, PaymentStatus.CANCELLED, OrderStatus.CANCELLED
        ),
        GatewayPaymentStatus.REFUNDED: StatusTransition(
            GatewayPaymentStatus.REFUNDED, PaymentStatus.REFUNDED, OrderStatus.REFUNDED
        ),
    }

    # Checked in this order; the first class present wins.
    _MERCHANT_ORDER_PRECEDENCE: tuple[tuple[GatewayPaymentStatus, ...], ...] = (
        (GatewayPaymentStatus.APPROVED,),
        (GatewayPaymentStatus.PENDING, GatewayPaymentStatus.IN_PROCESS),
        (GatewayPaymentStatus.REFUNDED,),
        (GatewayPaymentStatus.CANCELLED,),
    )

    def map_gateway_status(self, raw_status: str | None) -> StatusTransition | None:
        """
        Map a raw gateway payment status to the order transition.

        Args:
            raw_status: Status string as returned by the gateway

        Returns:
            StatusTransition, or None for statuses this system does not model
        """
        if not raw_status:
            return None
        try:
            gateway_status = GatewayPaymentStatus.from_string(str(raw_status))
        except ValueError:
            return None
        return self._TRANSITIONS[gateway_status]

    def classify_merchant_order(self, payments: Iterable[dict[str, Any]]) -> MerchantOrderClassification:
        """
        Classify a merchant order by the statuses of its attached payments.

        Precedence: approved > pending/in_process > refunded > cancelled,
        falling back to pending when none of them is present.
        """
        payments = [p for p in payments if isinstance(p, dict)]
        for status_class in self._MERCHANT_ORDER_PRECEDENCE:
            wanted = {s.value for s in status_class}
            for payment in payments:
                if payment.get("status") in wanted:
                    payment_id = payment.get("id")
                    return MerchantOrderClassification(
                        gateway_status=status_class[0],
                        payment_id=str(payment_id) if payment_id is not None else None,
                    )
        return MerchantOrderClassification(gateway_status=GatewayPaymentStatus.PENDING, payment_id=None)

    def is_superseded(self, order: Order, transition: StatusTransition, gateway_payment_id: str | None) -> bool:
        """
        Check if an outcome belongs to a payment superseded by an approval.

        Once an order is paid, a pending/rejected/cancelled result for a
        different gateway payment must not move it back. The approved
        payment itself, and refunds, always apply.
        """
        if not order.is_paid:
            return False
        if transition.payment_status in (PaymentStatus.APPROVED, PaymentStatus.REFUNDED):
            return False
        approved_id = order.gateway_payment_id
        if approved_id is None:
            return False
        return str(gateway_payment_id) != approved_id
