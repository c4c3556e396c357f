"""
Order management models
"""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, Column, Float, ForeignKey, Index, Integer, String, Text, Uuid, false
from sqlalchemy.orm import Mapped, relationship

from .base import Base, JSONType, TimestampMixin

if TYPE_CHECKING:
    from .catalog import Product
    from .customers import Customer


class Order(Base, TimestampMixin):
    """Purchase orders placed at checkout"""

    __tablename__ = "orders"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_number = Column(String(50), unique=True, nullable=False, index=True)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=False)

    # Lifecycle: pending, confirmed, processing, shipped, delivered, cancelled, refunded
    status = Column(String(20), nullable=False, default="pending")
    subtotal = Column(Float, nullable=False, default=0)
    total_amount = Column(Float, nullable=False, default=0)

    # Payment: pending, approved, rejected, cancelled, refunded
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_method = Column(String(50))

    # Gateway correlation. payment_id is the dedicated payment field,
    # mercado_pago_id the historical one (may hold a preference ID for old orders),
    # payment_details.mercado_pago_id the last reconciled gateway payment.
    payment_id = Column(String(100), index=True)
    mercado_pago_id = Column(String(100), index=True)

    # Last-known gateway snapshot, overwritten on every reconciliation
    payment_details = Column(JSONType, default=dict)

    # Set once, never reset: inventory was decremented for this order
    stock_deducted = Column(Boolean, nullable=False, default=False, server_default=false())

    notes = Column(Text)

    # Relationships
    customer: Mapped["Customer"] = relationship("Customer", back_populates="orders")
    items: Mapped[List["OrderItem"]] = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_orders_customer", customer_id),
        Index("idx_orders_status", status),
        Index("idx_orders_payment_status", payment_status),
    )

    def __repr__(self):
        return f"<Order(number='{self.order_number}', status='{self.status}', payment='{self.payment_status}')>"


class OrderItem(Base, TimestampMixin):
    """Order line items, immutable once the order is created"""

    __tablename__ = "order_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id"), nullable=False)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=True)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)  # Price at time of purchase

    # Product info at time of purchase
    product_name = Column(String(255), nullable=False)
    product_sku = Column(String(50))

    # Relationships
    order: Mapped["Order"] = relationship("Order", back_populates="items")
    product: Mapped["Product"] = relationship("Product")

    __table_args__ = (
        Index("idx_order_items_order", order_id),
        Index("idx_order_items_product", product_id),
    )

    def __repr__(self):
        return f"<OrderItem(product='{self.product_name}', quantity={self.quantity}, price={self.unit_price})>"
