"""
Payment audit log
"""

import uuid

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Text, Uuid

from .base import Base, JSONType, TimestampMixin


class PaymentLog(Base, TimestampMixin):
    """Audit trail of gateway interactions (one row per webhook outcome)"""

    __tablename__ = "payment_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    type = Column(String(20), nullable=False, default="webhook")
    reference_id = Column(String(100))
    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id"), nullable=True)
    request = Column(JSONType)
    response = Column(JSONType)
    success = Column(Boolean, nullable=False, default=False)
    error = Column(Text)

    __table_args__ = (
        Index("idx_payment_logs_type", type),
        Index("idx_payment_logs_reference", reference_id),
        Index("idx_payment_logs_created", "created_at"),
    )

    def __repr__(self):
        return f"<PaymentLog(type='{self.type}', ref='{self.reference_id}', success={self.success})>"
