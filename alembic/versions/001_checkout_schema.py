"""Checkout schema - catalog, carts, shipping zones, coupons, orders and digital deliveries.

Revision ID: 001_checkout_schema
Revises: None
Create Date: 2026-10-18

All monetary columns hold integer cents.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_checkout_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _jsonb_list(name: str) -> sa.Column:
    return sa.Column(name, postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb"))


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("sku", sa.String(100), nullable=False, unique=True),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("base_price", sa.Integer(), nullable=False),
        sa.Column("sale_price", sa.Integer()),
        sa.Column("stock_quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("allow_backorder", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("track_inventory", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("total_sold", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("product_type", sa.String(20), nullable=False, server_default="physical"),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("digital_file", postgresql.JSONB()),
        _jsonb_list("images"),
        *_timestamps(),
        sa.CheckConstraint("base_price >= 0", name="ck_products_base_price_non_negative"),
    )
    op.create_index("ix_products_slug", "products", ["slug"])
    op.create_index("idx_products_status", "products", ["status"])

    op.create_table(
        "product_variants",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "product_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("products.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sku", sa.String(100), nullable=False, unique=True),
        _jsonb_list("attributes"),
        sa.Column("price", sa.Integer()),
        sa.Column("stock_quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("image", sa.String(500)),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("idx_product_variants_product", "product_variants", ["product_id"])

    op.create_table(
        "carts",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(64), unique=True),
        sa.Column("session_id", sa.String(128), unique=True),
        *_timestamps(),
        sa.CheckConstraint("(user_id IS NOT NULL) <> (session_id IS NOT NULL)", name="ck_carts_single_owner"),
    )

    op.create_table(
        "cart_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "cart_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("carts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("variant_id", postgresql.UUID(as_uuid=True)),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_snapshot", sa.Integer()),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("quantity BETWEEN 1 AND 99", name="ck_cart_items_quantity"),
    )
    op.create_index("idx_cart_items_cart", "cart_items", ["cart_id"])

    op.create_table(
        "shipping_zones",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        _jsonb_list("countries"),
        _jsonb_list("states"),
        _jsonb_list("methods"),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("idx_shipping_zones_active_sort", "shipping_zones", ["is_active", "sort_order"])

    op.create_table(
        "coupons",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        sa.Column("description", sa.String(255)),
        sa.Column("discount_type", sa.String(20), nullable=False),
        sa.Column("discount_value", sa.Integer(), nullable=False),
        sa.Column("min_purchase", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_discount", sa.Integer()),
        sa.Column("start_date", sa.DateTime(timezone=True)),
        sa.Column("end_date", sa.DateTime(timezone=True)),
        sa.Column("usage_limit", sa.Integer()),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("user_limit", sa.Integer(), server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("usage_limit IS NULL OR usage_count <= usage_limit", name="ck_coupons_usage_within_limit"),
    )
    op.create_index("ix_coupons_code", "coupons", ["code"])

    op.create_table(
        "orders",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("order_number", sa.String(50), nullable=False, unique=True),
        sa.Column("tracking_code", sa.String(32), unique=True),
        sa.Column("user_id", sa.String(64)),
        sa.Column("guest_email", sa.String(255)),
        sa.Column("shipping_address", postgresql.JSONB(), nullable=False),
        sa.Column("billing_address", postgresql.JSONB(), nullable=False),
        sa.Column("billing_same_as_shipping", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("subtotal", sa.Integer(), nullable=False),
        sa.Column("shipping_cost", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("shipping_method", sa.String(50), nullable=False),
        sa.Column("shipping_method_label", sa.String(100), nullable=False),
        sa.Column("tax_amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("discount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("discount_code", sa.String(50)),
        sa.Column("discount_details", postgresql.JSONB()),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending_payment"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("customer_note", sa.Text(), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_orders_order_number", "orders", ["order_number"])
    op.create_index("idx_orders_user", "orders", ["user_id"])
    op.create_index("idx_orders_user_discount_code", "orders", ["user_id", "discount_code", "payment_status"])
    op.create_index("idx_orders_status", "orders", ["status"])

    op.create_table(
        "order_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "order_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("variant_id", postgresql.UUID(as_uuid=True)),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("sku", sa.String(100), nullable=False),
        sa.Column("image", sa.String(500)),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        _jsonb_list("variant_info"),
        sa.Column("line_total", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("idx_order_items_order", "order_items", ["order_id"])

    op.create_table(
        "digital_deliveries",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "order_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(64)),
        sa.Column("guest_email", sa.String(255)),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("variant_id", postgresql.UUID(as_uuid=True)),
        sa.Column("download_token", sa.String(64), nullable=False, unique=True),
        sa.Column("download_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_downloads", sa.Integer()),
        sa.Column("expires_at", sa.DateTime(timezone=True)),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("file_name", sa.String(255), nullable=False, server_default="download"),
        sa.Column("file_url", sa.String(500), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("user_id IS NOT NULL OR guest_email IS NOT NULL", name="ck_digital_deliveries_owner"),
    )
    op.create_index("idx_digital_deliveries_order", "digital_deliveries", ["order_id"])


def downgrade() -> None:
    op.drop_table("digital_deliveries")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("coupons")
    op.drop_table("shipping_zones")
    op.drop_table("cart_items")
    op.drop_table("carts")
    op.drop_table("product_variants")
    op.drop_table("products")
