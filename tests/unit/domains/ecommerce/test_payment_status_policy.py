"""
Unit Tests for PaymentStatusPolicy

Covers the raw status table, merchant-order precedence and the
stale-payment guard.
"""

import pytest

from marketplace.domains.ecommerce.domain import (
    GatewayPaymentStatus,
    Order,
    OrderStatus,
    PaymentStatus,
    PaymentStatusPolicy,
)


@pytest.fixture
def policy() -> PaymentStatusPolicy:
    return PaymentStatusPolicy()


@pytest.mark.unit
class TestMapGatewayStatus:
    @pytest.mark.parametrize(
        "raw_status,payment_status,order_status,deduct",
        [
            ("approved", PaymentStatus.APPROVED, OrderStatus.CONFIRMED, True),
            ("pending", PaymentStatus.PENDING, None, False),
            ("in_process", PaymentStatus.PENDING, None, False),
            ("rejected", PaymentStatus.REJECTED, OrderStatus.CANCELLED, False),
            ("cancelled", PaymentStatus.CANCELLED, OrderStatus.CANCELLED, False),
            ("refunded", PaymentStatus.REFUNDED, OrderStatus.REFUNDED, False),
        ],
    )
    def test_status_table(self, policy, raw_status, payment_status, order_status, deduct):
        transition = policy.map_gateway_status(raw_status)

        assert transition is not None
        assert transition.payment_status == payment_status
        assert transition.order_status == order_status
        assert transition.deduct_stock is deduct

    @pytest.mark.parametrize("raw_status", ["charged_back", "authorized", "", None])
    def test_unknown_status_returns_none(self, policy, raw_status):
        assert policy.map_gateway_status(raw_status) is None

    def test_status_is_case_insensitive(self, policy):
        assert policy.map_gateway_status("APPROVED").payment_status == PaymentStatus.APPROVED


@pytest.mark.unit
class TestClassifyMerchantOrder:
    def test_approved_wins_over_cancelled(self, policy):
        result = policy.classify_merchant_order(
            [{"id": 1, "status": "cancelled"}, {"id": 2, "status": "approved"}]
        )

        assert result.gateway_status == GatewayPaymentStatus.APPROVED
        assert result.payment_id == "2"

    def test_pending_wins_over_refunded_and_cancelled(self, policy):
        result = policy.classify_merchant_order(
            [{"id": 1, "status": "refunded"}, {"id": 2, "status": "in_process"}, {"id": 3, "status": "cancelled"}]
        )

        assert result.gateway_status == GatewayPaymentStatus.PENDING
        assert result.payment_id == "2"

    def test_refunded_wins_over_cancelled(self, policy):
        result = policy.classify_merchant_order([{"id": 1, "status": "cancelled"}, {"id": 2, "status": "refunded"}])

        assert result.gateway_status == GatewayPaymentStatus.REFUNDED

    def test_only_rejected_falls_back_to_pending(self, policy):
        result = policy.classify_merchant_order([{"id": 1, "status": "rejected"}])

        assert result.gateway_status == GatewayPaymentStatus.PENDING
        assert result.payment_id is None

    def test_no_payments_falls_back_to_pending(self, policy):
        result = policy.classify_merchant_order([])

        assert result.gateway_status == GatewayPaymentStatus.PENDING
        assert policy.map_gateway_status(result.gateway_status.value).order_status is None


@pytest.mark.unit
class TestIsSuperseded:
    def _approved_order(self) -> Order:
        return Order(
            id="order-1",
            order_number="ORD-1",
            status=OrderStatus.CONFIRMED,
            payment_status=PaymentStatus.APPROVED,
            payment_details={"mercado_pago_id": "111"},
        )

    def test_rejection_for_other_payment_is_superseded(self, policy):
        transition = policy.map_gateway_status("rejected")

        assert policy.is_superseded(self._approved_order(), transition, "222") is True

    def test_same_payment_is_not_superseded(self, policy):
        transition = policy.map_gateway_status("cancelled")

        assert policy.is_superseded(self._approved_order(), transition, "111") is False

    def test_refund_is_never_superseded(self, policy):
        transition = policy.map_gateway_status("refunded")

        assert policy.is_superseded(self._approved_order(), transition, "222") is False

    def test_unpaid_order_is_never_superseded(self, policy):
        order = Order(id="order-2", order_number="ORD-2")
        transition = policy.map_gateway_status("rejected")

        assert policy.is_superseded(order, transition, "222") is False
