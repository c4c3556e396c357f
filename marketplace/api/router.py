from fastapi import APIRouter

from marketplace.api.routes import mercadopago_webhook

api_router = APIRouter()

# API routes (all have /api/v1 prefix from the app factory)
api_router.include_router(mercadopago_webhook.router, tags=["Mercado Pago Webhook"])
