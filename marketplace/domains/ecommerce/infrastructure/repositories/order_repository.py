"""
Order Repository Implementation

SQLAlchemy implementation of IOrderRepository.
"""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any, cast

from sqlalchemy import Select, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.domains.ecommerce.application.ports import IOrderRepository
from marketplace.domains.ecommerce.domain.entities.order import Order, OrderItem
from marketplace.domains.ecommerce.domain.value_objects.order_status import (
    OrderStatus,
    PaymentStatus,
)
from marketplace.models.db.orders import Order as OrderModel

logger = logging.getLogger(__name__)


def _parse_uuid(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class SQLAlchemyOrderRepository(IOrderRepository):
    """
    SQLAlchemy implementation of order repository.

    Writes are flushed into the caller's transaction; the request
    boundary commits or rolls back.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _select(self) -> Select:
        return (
            select(OrderModel)
            .options(selectinload(OrderModel.items), selectinload(OrderModel.customer))
            .execution_options(populate_existing=True)
        )

    async def _first(self, stmt: Select) -> Order | None:
        result = await self.session.execute(stmt.order_by(OrderModel.created_at.desc()).limit(1))
        model = result.scalars().first()
        return self._to_entity(model) if model else None

    async def get_by_id(self, order_id: str) -> Order | None:
        """Get order by ID, falling back to the order number."""
        order_uuid = _parse_uuid(order_id)
        if order_uuid is None:
            return await self.get_by_order_number(order_id)
        return await self._first(self._select().where(OrderModel.id == order_uuid))

    async def get_by_order_number(self, order_number: str) -> Order | None:
        """Get order by order number."""
        return await self._first(self._select().where(OrderModel.order_number == order_number))

    async def find_by_payment_reference(
        self, payment_id: str, external_reference: str | None = None
    ) -> Order | None:
        """
        Find the order correlated with a gateway payment.

        Matches the payment ID against any of the correlation fields
        (snapshot mercado_pago_id, legacy mercado_pago_id column, dedicated
        payment_id column). Falls back to the payment's external reference,
        matched as order number or order ID.
        """
        payment_id = str(payment_id)
        order = await self._first(
            self._select().where(
                or_(
                    OrderModel.payment_details["mercado_pago_id"].as_string() == payment_id,
                    OrderModel.mercado_pago_id == payment_id,
                    OrderModel.payment_id == payment_id,
                )
            )
        )
        if order is None and external_reference:
            order = await self.find_by_reference(external_reference)
            if order is not None:
                logger.info(
                    f"Order {order.order_number} resolved by external_reference for payment {payment_id}"
                )
        return order

    async def find_by_merchant_order(
        self, external_reference: str | None, preference_id: str | None
    ) -> Order | None:
        """
        Find the order a merchant order refers to.

        The external reference (order ID or order number) is preferred;
        the preference ID is matched against the stored correlation fields.
        """
        if external_reference:
            order = await self.find_by_reference(external_reference)
            if order is not None:
                return order

        if preference_id:
            return await self._first(
                self._select().where(
                    or_(
                        OrderModel.mercado_pago_id == preference_id,
                        OrderModel.payment_details["mercado_pago_id"].as_string() == preference_id,
                    )
                )
            )
        return None

    async def find_by_reference(self, reference: str) -> Order | None:
        """Find an order by order number or order ID."""
        conditions = [OrderModel.order_number == reference]
        reference_uuid = _parse_uuid(reference)
        if reference_uuid is not None:
            conditions.append(OrderModel.id == reference_uuid)
        return await self._first(self._select().where(or_(*conditions)))

    async def apply_payment_state(
        self,
        order_id: str,
        payment_status: str,
        order_status: str | None,
        payment_details: dict[str, Any],
    ) -> bool:
        """
        Persist payment status, optional order status and the snapshot.

        Approvals are written with a conditional UPDATE guarded by
        "payment_status is not already approved"; one affected row means
        this call performed the transition.

        Returns:
            True if the payment status transitioned to approved
        """
        order_uuid = uuid.UUID(str(order_id))
        values: dict[str, Any] = {
            "payment_status": payment_status,
            "payment_details": payment_details,
            "updated_at": datetime.now(UTC),
        }
        if order_status:
            values["status"] = order_status
        if payment_details.get("payment_method"):
            values["payment_method"] = payment_details["payment_method"]

        if payment_status == PaymentStatus.APPROVED.value:
            result = await self.session.execute(
                update(OrderModel)
                .where(
                    OrderModel.id == order_uuid,
                    OrderModel.payment_status != PaymentStatus.APPROVED.value,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                return True

        await self.session.execute(
            update(OrderModel)
            .where(OrderModel.id == order_uuid)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return False

    # Mapping methods

    def _to_entity(self, model: OrderModel) -> Order:
        """Convert model to entity."""
        items = [
            OrderItem(
                product_id=str(item_model.product_id) if item_model.product_id else None,
                product_name=cast(str, item_model.product_name) or "",
                quantity=cast(int, item_model.quantity) or 0,
                unit_price=cast(float | None, item_model.unit_price) or 0.0,
                sku=cast(str | None, item_model.product_sku),
            )
            for item_model in model.items or []
        ]

        # Map status strings to enums
        status_str = cast(str | None, model.status) or "pending"
        try:
            order_status = OrderStatus(status_str)
        except ValueError:
            order_status = OrderStatus.PENDING

        payment_status_str = cast(str | None, model.payment_status)
        try:
            payment_status = PaymentStatus(payment_status_str) if payment_status_str else PaymentStatus.PENDING
        except ValueError:
            payment_status = PaymentStatus.PENDING

        customer = model.customer
        return Order(
            id=str(model.id),
            order_number=cast(str, model.order_number),
            customer_email=customer.email if customer is not None else None,
            status=order_status,
            payment_status=payment_status,
            payment_method=cast(str | None, model.payment_method),
            payment_id=cast(str | None, model.payment_id),
            mercado_pago_id=cast(str | None, model.mercado_pago_id),
            payment_details=dict(model.payment_details or {}),
            stock_deducted=bool(model.stock_deducted),
            items=items,
        )
