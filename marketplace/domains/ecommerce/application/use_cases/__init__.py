"""
E-commerce Use Cases

Business use cases for the e-commerce domain.
Each use case represents a single business operation.
"""

from .deduct_stock import DeductStockIfNeededUseCase
from .notify_payment_approved import NotifyPaymentApprovedUseCase
from .process_webhook import ProcessWebhookNotificationUseCase
from .reconcile_merchant_order import ReconcileMerchantOrderUseCase
from .reconcile_payment import ReconcilePaymentUseCase

__all__ = [
    "DeductStockIfNeededUseCase",
    "NotifyPaymentApprovedUseCase",
    "ReconcilePaymentUseCase",
    "ReconcileMerchantOrderUseCase",
    "ProcessWebhookNotificationUseCase",
]
