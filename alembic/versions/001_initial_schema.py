"""Initial schema: customers, products, orders, order items, payment logs.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200)),
        sa.Column("email", sa.String(255)),
        *_timestamps(),
    )
    op.create_index("ix_customers_email", "customers", ["email"], unique=True)

    op.create_table(
        "products",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("sku", sa.String(50)),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("available_quantity", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )
    op.create_index("ix_products_sku", "products", ["sku"], unique=True)
    op.create_index("idx_products_stock", "products", ["stock"])

    op.create_table(
        "orders",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("order_number", sa.String(50), nullable=False),
        sa.Column("customer_id", UUID(as_uuid=True), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("subtotal", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_method", sa.String(50)),
        sa.Column("payment_id", sa.String(100)),
        sa.Column("mercado_pago_id", sa.String(100)),
        sa.Column("payment_details", JSONB(), server_default=sa.text("'{}'::jsonb")),
        sa.Column("stock_deducted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)
    op.create_index("ix_orders_payment_id", "orders", ["payment_id"])
    op.create_index("ix_orders_mercado_pago_id", "orders", ["mercado_pago_id"])
    op.create_index("idx_orders_customer", "orders", ["customer_id"])
    op.create_index("idx_orders_status", "orders", ["status"])
    op.create_index("idx_orders_payment_status", "orders", ["payment_status"])
    # Lookup by the reconciled gateway payment stored in the snapshot
    op.execute(
        "CREATE INDEX idx_orders_details_mercado_pago_id ON orders ((payment_details ->> 'mercado_pago_id'))"
    )

    op.create_table(
        "order_items",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("order_id", UUID(as_uuid=True), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("product_id", UUID(as_uuid=True), sa.ForeignKey("products.id"), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Float(), nullable=False),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("product_sku", sa.String(50)),
        *_timestamps(),
    )
    op.create_index("idx_order_items_order", "order_items", ["order_id"])
    op.create_index("idx_order_items_product", "order_items", ["product_id"])

    op.create_table(
        "payment_logs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("type", sa.String(20), nullable=False, server_default="webhook"),
        sa.Column("reference_id", sa.String(100)),
        sa.Column("order_id", UUID(as_uuid=True), sa.ForeignKey("orders.id"), nullable=True),
        sa.Column("request", JSONB()),
        sa.Column("response", JSONB()),
        sa.Column("success", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("error", sa.Text()),
        *_timestamps(),
    )
    op.create_index("idx_payment_logs_type", "payment_logs", ["type"])
    op.create_index("idx_payment_logs_reference", "payment_logs", ["reference_id"])
    op.create_index("idx_payment_logs_created", "payment_logs", ["created_at"])


def downgrade() -> None:
    op.drop_table("payment_logs")
    op.drop_table("order_items")
    op.execute("DROP INDEX IF EXISTS idx_orders_details_mercado_pago_id")
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_table("customers")
