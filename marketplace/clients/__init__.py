"""
Clients for external APIs
"""

from .mercado_pago_client import (
    MercadoPagoAuthError,
    MercadoPagoClient,
    MercadoPagoConnectionError,
    MercadoPagoError,
    MercadoPagoHTTPError,
    MercadoPagoNotFoundError,
)
from .resend_client import EmailDeliveryError, ResendEmailClient

__all__ = [
    "MercadoPagoClient",
    "MercadoPagoError",
    "MercadoPagoAuthError",
    "MercadoPagoNotFoundError",
    "MercadoPagoConnectionError",
    "MercadoPagoHTTPError",
    "ResendEmailClient",
    "EmailDeliveryError",
]
