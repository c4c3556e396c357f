"""
Unit Tests for MercadoPagoPaymentMapper
"""

from datetime import UTC, datetime

import pytest

from marketplace.services.mercadopago import MercadoPagoPaymentMapper

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)


def _payment(**fields):
    payment = {
        "id": 123,
        "status": "approved",
        "status_detail": "accredited",
        "payment_method_id": "visa",
        "transaction_amount": 300.0,
    }
    payment.update(fields)
    return payment


@pytest.mark.unit
class TestBuildPaymentSnapshot:
    def test_approved_snapshot(self):
        snapshot = MercadoPagoPaymentMapper.build_payment_snapshot(
            _payment(transaction_details={"net_received_amount": 285.5}, date_approved="2026-05-01T09:00:00.000-03:00"),
            "123",
            "approved",
            now=NOW,
        )

        assert snapshot == {
            "mercado_pago_id": "123",
            "status": "approved",
            "status_detail": "accredited",
            "payment_method": "visa",
            "transaction_amount": 300.0,
            "net_received_amount": 285.5,
            "paid_at": "2026-05-01T09:00:00.000-03:00",
        }

    def test_approved_without_date_uses_processing_time(self):
        snapshot = MercadoPagoPaymentMapper.build_payment_snapshot(_payment(), "123", "approved", now=NOW)

        assert snapshot["paid_at"] == NOW.isoformat()

    def test_rejected_snapshot_has_failure_reason(self):
        snapshot = MercadoPagoPaymentMapper.build_payment_snapshot(
            _payment(status="rejected", status_detail="cc_rejected_insufficient_amount"), "123", "rejected", now=NOW
        )

        assert snapshot["failure_reason"] == "cc_rejected_insufficient_amount"
        assert "paid_at" not in snapshot

    def test_refunded_snapshot_has_refunded_at(self):
        snapshot = MercadoPagoPaymentMapper.build_payment_snapshot(
            _payment(status="refunded"), "123", "refunded", now=NOW
        )

        assert snapshot["refunded_at"] == NOW.isoformat()

    def test_payment_type_used_when_method_missing(self):
        payment = _payment(payment_type_id="ticket")
        del payment["payment_method_id"]

        snapshot = MercadoPagoPaymentMapper.build_payment_snapshot(payment, "123", "pending", now=NOW)

        assert snapshot["payment_method"] == "ticket"
        assert "net_received_amount" not in snapshot

    def test_payload_without_id_keeps_resolved_id(self):
        payment = _payment()
        del payment["id"]

        snapshot = MercadoPagoPaymentMapper.build_payment_snapshot(payment, "456", "approved", now=NOW)

        assert snapshot["mercado_pago_id"] == "456"


@pytest.mark.unit
class TestExtractors:
    @pytest.mark.parametrize(
        "resource,expected",
        [
            ({"external_reference": "ORD-1001"}, "ORD-1001"),
            ({"external_reference": 42}, "42"),
            ({"external_reference": "   "}, None),
            ({"external_reference": None}, None),
            ({}, None),
        ],
    )
    def test_external_reference(self, resource, expected):
        assert MercadoPagoPaymentMapper.extract_external_reference(resource) == expected

    def test_merchant_order_snapshot(self):
        snapshot = MercadoPagoPaymentMapper.build_merchant_order_snapshot("789", "approved", "2", "approved", now=NOW)

        assert snapshot == {
            "merchant_order_id": "789",
            "status": "approved",
            "mercado_pago_id": "2",
            "paid_at": NOW.isoformat(),
        }
