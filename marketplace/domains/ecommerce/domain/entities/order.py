"""
Order Entity for E-commerce Domain

Represents a customer order as seen by payment reconciliation.
"""

from dataclasses import dataclass, field
from typing import Any

from ..value_objects.order_status import OrderStatus, PaymentStatus


@dataclass
class OrderItem:
    """
    Individual item in an order.

    Quantity and unit price are fixed at purchase time.
    """

    product_id: str | None
    product_name: str
    quantity: int
    unit_price: float = 0.0
    sku: str | None = None

    def is_deductible(self) -> bool:
        """Check if this line can decrement inventory."""
        return bool(self.product_id) and self.quantity > 0


@dataclass
class Order:
    """
    Order aggregate for the e-commerce domain.

    Only the fields payment reconciliation reads are carried here.
    """

    id: str
    order_number: str
    customer_email: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: str | None = None
    payment_id: str | None = None
    mercado_pago_id: str | None = None
    payment_details: dict[str, Any] = field(default_factory=dict)
    stock_deducted: bool = False
    items: list[OrderItem] = field(default_factory=list)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.APPROVED

    @property
    def gateway_payment_id(self) -> str | None:
        """
        The gateway payment this order was last reconciled against.

        Falls back to the dedicated payment field for orders reconciled
        before the snapshot carried the ID.
        """
        details_id = (self.payment_details or {}).get("mercado_pago_id")
        if details_id:
            return str(details_id)
        return self.payment_id
