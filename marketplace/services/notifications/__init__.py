"""
Notification services
"""

from .payment_notification import PaymentNotificationService

__all__ = ["PaymentNotificationService"]
