"""
Mercado Pago Webhook Handler

Receives payment notifications from Mercado Pago and reconciles the
referenced order: re-fetches the authoritative payment or merchant order,
maps its status onto the order, deducts stock once on approval and
e-mails the customer once.

Webhook Flow:
1. Verify the shared secret (query parameter 'secret') -> 401
2. Normalize body/query into (resource id, topic)
3. Dispatch by topic: payment, merchant_order, anything else ignored
4. Commit the reconciliation, then e-mail a new approval and record the audit log
5. Answer 2xx for every handled or ignored case so MP stops retrying;
   400 for a missing ID, 500 for gateway failures so MP retries

Endpoints:
    POST /api/v1/webhooks/mercadopago - provider deliveries (webhooks v1/v2, IPN)
    GET  /api/v1/webhooks/mercadopago - manual re-processing by ID (same logic)
    GET  /api/v1/webhooks/mercadopago/health
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.api.dependencies import get_webhook_use_case, verify_webhook_secret
from marketplace.clients.mercado_pago_client import MercadoPagoError
from marketplace.config.settings import get_settings
from marketplace.core.domain import InvalidWebhookPayloadException
from marketplace.database.async_db import get_async_db
from marketplace.domains.ecommerce.application.use_cases import ProcessWebhookNotificationUseCase
from marketplace.domains.ecommerce.infrastructure.repositories import SQLAlchemyPaymentLogRepository
from marketplace.services.mercadopago import parse_notification

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
logger = logging.getLogger(__name__)


async def _process_notification(
    request: Request,
    db: AsyncSession,
    use_case: ProcessWebhookNotificationUseCase,
) -> dict[str, Any]:
    """Shared POST/GET handling."""
    raw_body = await request.body() if request.method == "POST" else b""
    query = {key: value for key, value in request.query_params.items() if key != "secret"}

    logger.info(
        f"[MP-WEBHOOK] {request.method} received: query={query} "
        f"body={raw_body[:500].decode('utf-8', errors='replace')}"
    )

    notification = parse_notification(raw_body, query)
    logger.info(f"[MP-WEBHOOK] Parsed: topic={notification.topic}, id={notification.resource_id}")

    audit = SQLAlchemyPaymentLogRepository(db)
    audit_request = {"method": request.method, "query": query, **notification.to_dict()}

    try:
        result = await use_case.execute(notification)
    except InvalidWebhookPayloadException as e:
        logger.warning(f"[MP-WEBHOOK] {e.message} (topic={notification.topic})")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except MercadoPagoError as e:
        logger.error(f"[MP-WEBHOOK] MP API error for {notification.resource_id}: {e}")
        await db.rollback()
        await audit.record(
            notification.resource_id,
            request=audit_request,
            response=None,
            success=False,
            error=str(e),
        )
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Payment gateway error") from e

    await db.commit()
    await use_case.notify_after_commit(result)

    response = result.to_response()
    await audit.record(
        result.reference_id or notification.resource_id,
        request=audit_request,
        response=response,
        success=True,
        order_id=result.order_id,
    )
    return response


@router.post("/mercadopago", dependencies=[Depends(verify_webhook_secret)])
async def mercadopago_webhook(
    request: Request,
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    use_case: ProcessWebhookNotificationUseCase = Depends(get_webhook_use_case),  # noqa: B008
):
    """
    Handle Mercado Pago payment notifications.

    Accepts JSON bodies ({"type", "data": {"id"}}, {"id", "type"},
    {"resource", "topic"}) or IPN query parameters (id/payment_id,
    topic/type). Body fields fall back to the query string.
    """
    return await _process_notification(request, db, use_case)


@router.get("/mercadopago", dependencies=[Depends(verify_webhook_secret)])
async def mercadopago_webhook_get(
    request: Request,
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    use_case: ProcessWebhookNotificationUseCase = Depends(get_webhook_use_case),  # noqa: B008
):
    """
    Re-process a payment or merchant order by ID.

    Query: ?secret=...&id=<id>[&topic=payment|merchant_order]
    """
    return await _process_notification(request, db, use_case)


@router.get("/mercadopago/health")
async def mercadopago_webhook_health():
    """Health check for Mercado Pago webhook endpoint."""
    settings = get_settings()
    return {
        "status": "ok",
        "webhook_available": True,
        "secret_configured": bool(settings.MERCADO_PAGO_WEBHOOK_SECRET),
        "gateway_configured": bool(settings.MERCADO_PAGO_ACCESS_TOKEN),
        "email_enabled": settings.email_enabled,
    }
