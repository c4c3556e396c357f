"""
Customer models
"""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import Mapped, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .orders import Order


class Customer(Base, TimestampMixin):
    """Storefront buyers (retailers purchasing wholesale)"""

    __tablename__ = "customers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200))
    email = Column(String(255), unique=True, index=True)

    # Relationships
    orders: Mapped[List["Order"]] = relationship("Order", back_populates="customer")

    def __repr__(self):
        return f"<Customer(email='{self.email}')>"
