"""
Mercado Pago webhook support services.
"""

from .notification_parser import MPWebhookPayload, parse_body, parse_notification
from .payment_mapper import MercadoPagoPaymentMapper

__all__ = [
    "MPWebhookPayload",
    "MercadoPagoPaymentMapper",
    "parse_body",
    "parse_notification",
]
