"""
Repository tests for order lookup, payment state writes and stock adjustments.
"""

import pytest
from sqlalchemy import select

from marketplace.domains.ecommerce.domain.value_objects import OrderStatus, PaymentStatus
from marketplace.domains.ecommerce.infrastructure.repositories import (
    SQLAlchemyInventoryRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyPaymentLogRepository,
)
from marketplace.models.db import PaymentLog


class TestOrderLookup:
    """Resolve orders from gateway references."""

    @pytest.mark.repository
    @pytest.mark.asyncio
    async def test_get_by_id_and_order_number(self, seed_order, db_session):
        seeded = await seed_order(order_number="ORD-2001")
        repo = SQLAlchemyOrderRepository(db_session)

        by_id = await repo.get_by_id(seeded["order_id"])
        by_number = await repo.get_by_id("ORD-2001")

        assert by_id is not None
        assert by_id.order_number == "ORD-2001"
        assert by_id.customer_email == "buyer-ord-2001@example.com"
        assert len(by_id.items) == 1
        assert by_number is not None
        assert by_number.id == seeded["order_id"]

    @pytest.mark.repository
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "order_fields",
        [
            {"payment_details": {"mercado_pago_id": "555"}},
            {"mercado_pago_id": "555"},
            {"payment_id": "555"},
        ],
    )
    async def test_find_by_payment_reference_matches_any_field(self, seed_order, db_session, order_fields):
        seeded = await seed_order(**order_fields)
        repo = SQLAlchemyOrderRepository(db_session)

        order = await repo.find_by_payment_reference("555")

        assert order is not None
        assert order.id == seeded["order_id"]

    @pytest.mark.repository
    @pytest.mark.asyncio
    async def test_find_by_payment_reference_falls_back_to_external_reference(self, seed_order, db_session):
        by_number = await seed_order(order_number="ORD-3001")
        by_id = await seed_order(order_number="ORD-3002")
        repo = SQLAlchemyOrderRepository(db_session)

        first = await repo.find_by_payment_reference("999", external_reference="ORD-3001")
        second = await repo.find_by_payment_reference("998", external_reference=by_id["order_id"])
        missing = await repo.find_by_payment_reference("997", external_reference="ORD-404")

        assert first is not None and first.id == by_number["order_id"]
        assert second is not None and second.id == by_id["order_id"]
        assert missing is None

    @pytest.mark.repository
    @pytest.mark.asyncio
    async def test_find_by_merchant_order(self, seed_order, db_session):
        by_reference = await seed_order(order_number="ORD-4001")
        by_preference = await seed_order(order_number="ORD-4002", mercado_pago_id="pref-123")
        repo = SQLAlchemyOrderRepository(db_session)

        first = await repo.find_by_merchant_order("ORD-4001", None)
        second = await repo.find_by_merchant_order(None, "pref-123")
        third = await repo.find_by_merchant_order("ORD-404", "pref-123")
        missing = await repo.find_by_merchant_order(None, None)

        assert first is not None and first.id == by_reference["order_id"]
        assert second is not None and second.id == by_preference["order_id"]
        assert third is not None and third.id == by_preference["order_id"]
        assert missing is None


class TestApplyPaymentState:
    """Conditional approval write."""

    @pytest.mark.repository
    @pytest.mark.asyncio
    async def test_approval_transitions_once(self, seed_order, async_session_factory, fetch_order):
        seeded = await seed_order()
        snapshot = {"mercado_pago_id": "123", "status": "approved", "payment_method": "visa"}

        async with async_session_factory() as session:
            repo = SQLAlchemyOrderRepository(session)
            first = await repo.apply_payment_state(seeded["order_id"], "approved", "confirmed", snapshot)
            second = await repo.apply_payment_state(seeded["order_id"], "approved", "confirmed", snapshot)
            await session.commit()

        assert first is True
        assert second is False
        order = await fetch_order(seeded["order_id"])
        assert order.payment_status == PaymentStatus.APPROVED.value
        assert order.status == OrderStatus.CONFIRMED.value
        assert order.payment_method == "visa"
        assert order.payment_details["mercado_pago_id"] == "123"

    @pytest.mark.repository
    @pytest.mark.asyncio
    async def test_pending_keeps_order_status(self, seed_order, async_session_factory, fetch_order):
        seeded = await seed_order(status="processing")

        async with async_session_factory() as session:
            repo = SQLAlchemyOrderRepository(session)
            transitioned = await repo.apply_payment_state(
                seeded["order_id"], "pending", None, {"mercado_pago_id": "123", "status": "in_process"}
            )
            await session.commit()

        assert transitioned is False
        order = await fetch_order(seeded["order_id"])
        assert order.payment_status == "pending"
        assert order.status == "processing"
        assert order.payment_details["status"] == "in_process"

    @pytest.mark.repository
    @pytest.mark.asyncio
    async def test_uncommitted_write_is_rolled_back(self, seed_order, async_session_factory, fetch_order):
        seeded = await seed_order()

        async with async_session_factory() as session:
            repo = SQLAlchemyOrderRepository(session)
            await repo.apply_payment_state(seeded["order_id"], "approved", "confirmed", {"mercado_pago_id": "1"})
            await session.rollback()

        order = await fetch_order(seeded["order_id"])
        assert order.payment_status == "pending"


class TestInventoryRepository:
    """Conditional stock writes."""

    @pytest.mark.repository
    @pytest.mark.asyncio
    async def test_claim_stock_deduction_only_once(self, seed_order, async_session_factory, fetch_order):
        seeded = await seed_order()

        async with async_session_factory() as session:
            repo = SQLAlchemyInventoryRepository(session)
            first = await repo.claim_stock_deduction(seeded["order_id"])
            second = await repo.claim_stock_deduction(seeded["order_id"])
            await session.commit()

        assert (first, second) == (True, False)
        order = await fetch_order(seeded["order_id"])
        assert order.stock_deducted is True

    @pytest.mark.repository
    @pytest.mark.asyncio
    async def test_decrement_stock_never_goes_negative(self, seed_order, async_session_factory, fetch_product):
        seeded = await seed_order(lines=[(5, 1)])
        product_id = seeded["product_ids"][0]

        async with async_session_factory() as session:
            repo = SQLAlchemyInventoryRepository(session)
            enough = await repo.decrement_stock(product_id, 4)
            too_many = await repo.decrement_stock(product_id, 2)
            invalid = await repo.decrement_stock("not-a-uuid", 1)
            await session.commit()

        assert (enough, too_many, invalid) == (True, False, False)
        product = await fetch_product(product_id)
        assert product.stock == 1
        assert product.available_quantity == 1


class TestPaymentLogRepository:
    """Audit rows."""

    @pytest.mark.repository
    @pytest.mark.asyncio
    async def test_record_commits_row(self, seed_order, async_session_factory):
        seeded = await seed_order()

        async with async_session_factory() as session:
            repo = SQLAlchemyPaymentLogRepository(session)
            await repo.record(
                "123",
                request={"resource_id": "123", "topic": "payment"},
                response={"message": "ok"},
                success=True,
                order_id=seeded["order_id"],
            )

        async with async_session_factory() as session:
            rows = (await session.execute(select(PaymentLog))).scalars().all()

        assert len(rows) == 1
        assert rows[0].type == "webhook"
        assert rows[0].reference_id == "123"
        assert rows[0].success is True
        assert str(rows[0].order_id) == seeded["order_id"]
