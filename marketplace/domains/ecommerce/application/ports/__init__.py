"""
Ecommerce Application Ports

Interface definitions (ports) for the Ecommerce domain.
Uses Protocol for structural typing.
"""

from typing import Any, Protocol, runtime_checkable

from marketplace.domains.ecommerce.domain.entities.order import Order


@runtime_checkable
class IOrderRepository(Protocol):
    """
    Interface for order repository.

    Defines the contract for order data access during reconciliation.
    """

    async def get_by_id(self, order_id: str) -> Order | None:
        """Get order by ID (or order number)"""
        ...

    async def find_by_payment_reference(
        self, payment_id: str, external_reference: str | None = None
    ) -> Order | None:
        """Find the order correlated with a gateway payment"""
        ...

    async def find_by_merchant_order(
        self, external_reference: str | None, preference_id: str | None
    ) -> Order | None:
        """Find the order a merchant order refers to"""
        ...

    async def apply_payment_state(
        self,
        order_id: str,
        payment_status: str,
        order_status: str | None,
        payment_details: dict[str, Any],
    ) -> bool:
        """Persist payment state; True when payment status transitioned to approved"""
        ...


@runtime_checkable
class IInventoryRepository(Protocol):
    """
    Interface for inventory adjustments.

    Both operations are single conditional writes.
    """

    async def claim_stock_deduction(self, order_id: str) -> bool:
        """Set the order's stock_deducted flag if still unset; True if claimed"""
        ...

    async def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Decrement stock and available quantity if stock suffices"""
        ...


@runtime_checkable
class IPaymentGateway(Protocol):
    """
    Interface for the payment provider.

    Returns parsed provider objects or raises a gateway error.
    """

    async def get_payment(self, payment_id: str) -> dict[str, Any]:
        """Fetch a payment by ID"""
        ...

    async def get_merchant_order(self, merchant_order_id: str) -> dict[str, Any]:
        """Fetch a merchant order by ID"""
        ...


@runtime_checkable
class IPaymentNotifier(Protocol):
    """
    Interface for customer payment notifications.

    Implementations must never raise.
    """

    async def send_payment_approved_email(
        self, customer_email: str, order_number: str, payment_id: str | None
    ) -> dict[str, Any]:
        """Notify the customer that the payment was approved"""
        ...


@runtime_checkable
class IPaymentLogRepository(Protocol):
    """
    Interface for the payment audit trail.

    Writes are best-effort.
    """

    async def record(
        self,
        reference_id: str | None,
        request: dict[str, Any],
        response: dict[str, Any] | None,
        success: bool,
        order_id: str | None = None,
        error: str | None = None,
    ) -> None:
        """Record a webhook outcome"""
        ...


__all__ = [
    "IOrderRepository",
    "IInventoryRepository",
    "IPaymentGateway",
    "IPaymentNotifier",
    "IPaymentLogRepository",
]
