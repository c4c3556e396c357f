"""
E-commerce Domain Services
"""

from marketplace.domains.ecommerce.domain.services.payment_status_policy import (
    MerchantOrderClassification,
    PaymentStatusPolicy,
    StatusTransition,
)

__all__ = [
    "PaymentStatusPolicy",
    "StatusTransition",
    "MerchantOrderClassification",
]
