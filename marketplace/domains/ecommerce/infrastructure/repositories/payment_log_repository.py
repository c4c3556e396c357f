"""
Payment Log Repository Implementation

Best-effort audit trail for webhook outcomes.
"""

import logging
import uuid
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.domains.ecommerce.application.ports import IPaymentLogRepository
from marketplace.models.db.payment_log import PaymentLog as PaymentLogModel

logger = logging.getLogger(__name__)


class SQLAlchemyPaymentLogRepository(IPaymentLogRepository):
    """
    Writes PaymentLog rows in their own commit.

    Call after the reconciliation has been committed or rolled back;
    a failed audit write is logged and rolled back, never raised.
    """

    def __init__(self, session: AsyncSession, log_type: str = "webhook"):
        self.session = session
        self.log_type = log_type

    async def record(
        self,
        reference_id: str | None,
        request: dict[str, Any],
        response: dict[str, Any] | None,
        success: bool,
        order_id: str | None = None,
        error: str | None = None,
    ) -> None:
        order_uuid = None
        if order_id:
            try:
                order_uuid = uuid.UUID(str(order_id))
            except ValueError:
                order_uuid = None

        entry = PaymentLogModel(
            type=self.log_type,
            reference_id=reference_id,
            order_id=order_uuid,
            request=request,
            response=response,
            success=success,
            error=error,
        )
        try:
            self.session.add(entry)
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.warning(f"[MP-WEBHOOK] Could not write payment log for {reference_id}: {e}")
            await self.session.rollback()
