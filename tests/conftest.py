"""
Shared pytest fixtures for all tests.

Provides an in-memory SQLite database with the application's models,
seed helpers, and in-memory fakes for the payment gateway and notifier.
"""

import os
import uuid
from collections.abc import AsyncGenerator
from typing import Any

# Ensure test environment before any application module reads settings
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["MERCADO_PAGO_WEBHOOK_SECRET"] = "test-webhook-secret"
os.environ["MERCADO_PAGO_ACCESS_TOKEN"] = "TEST-access-token"
os.environ["RESEND_API_KEY"] = ""

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from marketplace.clients.mercado_pago_client import MercadoPagoNotFoundError  # noqa: E402
from marketplace.models.db import Base, Customer, Order, OrderItem, Product  # noqa: E402

# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def async_engine():
    """In-memory SQLite engine shared by every session of a test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def async_session_factory(async_engine) -> async_sessionmaker:
    """Create async session factory."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(async_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


# ============================================================================
# SEED HELPERS
# ============================================================================


@pytest.fixture
def seed_order(async_session_factory):
    """
    Factory fixture: persist a customer, products and one order.

    Returns a dict with order_id, order_number and product_ids (str).
    """

    async def _seed(
        order_number: str = "ORD-1001",
        lines: list[tuple[int, int]] | None = None,
        customer_email: str | None = "",
        **order_fields: Any,
    ) -> dict[str, Any]:
        # customer_email: "" derives one from the order number, None leaves it unset
        # lines: (initial stock, quantity ordered) per product
        lines = lines if lines is not None else [(10, 3)]
        async with async_session_factory() as session:
            if customer_email == "":
                customer_email = f"buyer-{order_number.lower()}@example.com"
            customer = Customer(id=uuid.uuid4(), name="Buyer", email=customer_email)
            session.add(customer)

            products = []
            for index, (stock, _quantity) in enumerate(lines):
                product = Product(
                    id=uuid.uuid4(),
                    name=f"Product {index}",
                    sku=f"SKU-{order_number}-{index}",
                    price=100.0,
                    stock=stock,
                    available_quantity=stock,
                )
                session.add(product)
                products.append(product)

            order = Order(
                id=uuid.uuid4(),
                order_number=order_number,
                customer_id=customer.id,
                payment_details=order_fields.pop("payment_details", {}),
                **order_fields,
            )
            order.items = [
                OrderItem(
                    id=uuid.uuid4(),
                    product_id=product.id,
                    quantity=quantity,
                    unit_price=100.0,
                    product_name=product.name,
                    product_sku=product.sku,
                )
                for product, (_stock, quantity) in zip(products, lines, strict=True)
            ]
            session.add(order)
            await session.commit()

            return {
                "order_id": str(order.id),
                "order_number": order_number,
                "product_ids": [str(p.id) for p in products],
            }

    return _seed


@pytest.fixture
def fetch_order(async_session_factory):
    """Factory fixture: reload an order model by ID in a fresh session."""

    async def _fetch(order_id: str) -> Order:
        async with async_session_factory() as session:
            return await session.get(Order, uuid.UUID(order_id))

    return _fetch


@pytest.fixture
def fetch_product(async_session_factory):
    """Factory fixture: reload a product model by ID in a fresh session."""

    async def _fetch(product_id: str) -> Product:
        async with async_session_factory() as session:
            return await session.get(Product, uuid.UUID(product_id))

    return _fetch


# ============================================================================
# GATEWAY / NOTIFIER FAKES
# ============================================================================


class FakePaymentGateway:
    """In-memory payment gateway: returns stored payments and merchant orders."""

    def __init__(self) -> None:
        self.payments: dict[str, dict[str, Any]] = {}
        self.merchant_orders: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self.error: Exception | None = None

    def add_payment(self, payment_id: str, status: str, **fields: Any) -> dict[str, Any]:
        payment = {
            "id": int(payment_id) if payment_id.isdigit() else payment_id,
            "status": status,
            "status_detail": fields.pop("status_detail", f"{status}_detail"),
            "payment_method_id": "visa",
            "transaction_amount": 300.0,
            **fields,
        }
        self.payments[payment_id] = payment
        return payment

    def add_merchant_order(self, merchant_order_id: str, payments: list[dict[str, Any]], **fields: Any):
        merchant_order = {"id": int(merchant_order_id), "payments": payments, **fields}
        self.merchant_orders[merchant_order_id] = merchant_order
        return merchant_order

    async def get_payment(self, payment_id: str) -> dict[str, Any]:
        self.calls.append(("payment", payment_id))
        if self.error:
            raise self.error
        if payment_id not in self.payments:
            raise MercadoPagoNotFoundError(f"Payment {payment_id} not found")
        return dict(self.payments[payment_id])

    async def get_merchant_order(self, merchant_order_id: str) -> dict[str, Any]:
        self.calls.append(("merchant_order", merchant_order_id))
        if self.error:
            raise self.error
        if merchant_order_id not in self.merchant_orders:
            raise MercadoPagoNotFoundError(f"Merchant order {merchant_order_id} not found")
        return dict(self.merchant_orders[merchant_order_id])


class FakeNotifier:
    """Records payment approved e-mails; optionally raises."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self.fail = fail

    async def send_payment_approved_email(self, customer_email: str, order_number: str, payment_id: str | None):
        if self.fail:
            raise RuntimeError("smtp down")
        self.sent.append({"customer_email": customer_email, "order_number": order_number, "payment_id": payment_id})
        return {"success": True, "skipped": False}


@pytest.fixture
def fake_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def failing_notifier() -> FakeNotifier:
    return FakeNotifier(fail=True)
