"""
Product catalog models
"""

import uuid

from sqlalchemy import CheckConstraint, Column, Float, Index, Integer, String, Uuid

from .base import Base, TimestampMixin


class Product(Base, TimestampMixin):
    """Supplier products offered in the marketplace"""

    __tablename__ = "products"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    sku = Column(String(50), unique=True, index=True)
    price = Column(Float, nullable=False, default=0)

    # Inventory: raw units on hand and units offered for sale.
    # Both are decremented together when an order's payment is approved.
    stock = Column(Integer, nullable=False, default=0)
    available_quantity = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        Index("idx_products_stock", stock),
    )

    def __repr__(self):
        return f"<Product(sku='{self.sku}', stock={self.stock})>"
