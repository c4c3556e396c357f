"""
FastAPI dependencies for the payment webhook.
"""

import hmac
import logging
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.clients.mercado_pago_client import MercadoPagoClient
from marketplace.config.settings import Settings, get_settings
from marketplace.database.async_db import get_async_db
from marketplace.domains.ecommerce.application.ports import IPaymentGateway, IPaymentNotifier
from marketplace.domains.ecommerce.application.use_cases import ProcessWebhookNotificationUseCase
from marketplace.domains.ecommerce.infrastructure.repositories import (
    SQLAlchemyInventoryRepository,
    SQLAlchemyOrderRepository,
)
from marketplace.services.notifications import PaymentNotificationService

logger = logging.getLogger(__name__)


async def verify_webhook_secret(
    secret: str | None = Query(None, description="Shared webhook secret"),
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> bool:
    """
    Verify the webhook's 'secret' query parameter.

    An unset server secret rejects every request.
    """
    expected = settings.MERCADO_PAGO_WEBHOOK_SECRET
    if not expected:
        logger.error("[MP-WEBHOOK] MERCADO_PAGO_WEBHOOK_SECRET not configured, rejecting webhook")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    if not secret or not hmac.compare_digest(secret.encode(), expected.encode()):
        logger.warning("[MP-WEBHOOK] Invalid webhook secret")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    return True


async def get_payment_gateway() -> AsyncGenerator[IPaymentGateway, None]:
    """Yield a Mercado Pago client scoped to the request."""
    async with MercadoPagoClient() as client:
        yield client


def get_payment_notifier() -> IPaymentNotifier:
    """Get the customer payment notifier."""
    return PaymentNotificationService()


def get_webhook_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    gateway: IPaymentGateway = Depends(get_payment_gateway),  # noqa: B008
    notifier: IPaymentNotifier = Depends(get_payment_notifier),  # noqa: B008
) -> ProcessWebhookNotificationUseCase:
    """Build the webhook use case over the request's session."""
    return ProcessWebhookNotificationUseCase(
        gateway=gateway,
        order_repository=SQLAlchemyOrderRepository(db),
        inventory_repository=SQLAlchemyInventoryRepository(db),
        notifier=notifier,
    )
