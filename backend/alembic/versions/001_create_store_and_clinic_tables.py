"""Create store, clinic and blog tables

Revision ID: 001
Revises: None
Create Date: 2024-06-01 00:00:00.000000+00:00

What:  Initial AyurCare schema: users and roles, catalogue and cart, orders,
       practitioners/services/appointments, and blogs.
How:   PostgreSQL UUID primary keys (gen_random_uuid()), TIMESTAMP WITH TIME
       ZONE, NUMERIC(10, 2) for money.

Rollback: downgrade() drops every table (all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
        primary_key=True,
    )


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def _fk(name: str, target: str, ondelete: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    # ── Accounts ──────────────────────────────────────────────────────────
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False, comment="Lower-cased login e-mail"),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False, server_default=sa.text("''")),
        sa.Column("address", sa.Text(), nullable=False, server_default=sa.text("''")),
        _created_at(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("idx_users_created_at", "users", [sa.text("created_at DESC")])

    op.create_table(
        "user_roles",
        _id(),
        _fk("user_id", "users.id", "CASCADE"),
        sa.Column("role", sa.String(50), nullable=False),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )

    # ── Catalogue & cart ──────────────────────────────────────────────────
    op.create_table(
        "products",
        _id(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("stock_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("ingredients", sa.Text(), nullable=True),
        sa.Column("benefits", sa.Text(), nullable=True),
        sa.Column("usage_instructions", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        sa.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        sa.CheckConstraint("stock_count >= 0", name="ck_products_stock_non_negative"),
    )
    op.create_index(
        "idx_products_active_created_at",
        "products",
        ["is_active", sa.text("created_at DESC")],
    )

    op.create_table(
        "cart_items",
        _id(),
        _fk("user_id", "users.id", "CASCADE"),
        _fk("product_id", "products.id", "CASCADE"),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        _created_at(),
        sa.UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),
        sa.CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
    )

    # ── Orders ────────────────────────────────────────────────────────────
    op.create_table(
        "orders",
        _id(),
        _fk("user_id", "users.id", "CASCADE"),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_status", sa.String(50), nullable=False, server_default=sa.text("'completed'")),
        sa.Column(
            "delivery_status",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'processing'"),
            comment="processing, shipped, delivered",
        ),
        _created_at(),
    )
    op.create_index("idx_orders_user_created_at", "orders", ["user_id", sa.text("created_at DESC")])

    op.create_table(
        "order_items",
        _id(),
        _fk("order_id", "orders.id", "CASCADE"),
        _fk("product_id", "products.id", "SET NULL", nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, comment="Unit price at purchase time"),
    )

    # ── Clinic ────────────────────────────────────────────────────────────
    op.create_table(
        "practitioners",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("specialization", sa.String(200), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )

    op.create_table(
        "services",
        _id(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default=sa.text("30")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )

    op.create_table(
        "appointments",
        _id(),
        _fk("user_id", "users.id", "CASCADE"),
        _fk("practitioner_id", "practitioners.id", "CASCADE"),
        _fk("service_id", "services.id", "CASCADE"),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("appointment_time", sa.String(5), nullable=False, comment="HH:MM slot label"),
        sa.Column("notes", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "status",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'pending'"),
            comment="pending, confirmed, completed, cancelled",
        ),
        _created_at(),
    )
    op.create_index(
        "idx_appointments_practitioner_slot",
        "appointments",
        ["practitioner_id", "appointment_date", "appointment_time"],
    )
    op.create_index("idx_appointments_user_date", "appointments", ["user_id", "appointment_date"])
    op.create_index(
        "uq_appointments_active_slot",
        "appointments",
        ["practitioner_id", "appointment_date", "appointment_time"],
        unique=True,
        postgresql_where=sa.text("status IN ('pending', 'confirmed')"),
    )

    # ── Blog ──────────────────────────────────────────────────────────────
    op.create_table(
        "blogs",
        _id(),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        _fk("author_id", "users.id", "SET NULL", nullable=True),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    )
    op.create_index(
        "idx_blogs_published_created_at",
        "blogs",
        ["is_published", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_blogs_published_created_at", table_name="blogs")
    op.drop_table("blogs")
    op.drop_index("uq_appointments_active_slot", table_name="appointments")
    op.drop_index("idx_appointments_user_date", table_name="appointments")
    op.drop_index("idx_appointments_practitioner_slot", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("services")
    op.drop_table("practitioners")
    op.drop_table("order_items")
    op.drop_index("idx_orders_user_created_at", table_name="orders")
    op.drop_table("orders")
    op.drop_table("cart_items")
    op.drop_index("idx_products_active_created_at", table_name="products")
    op.drop_table("products")
    op.drop_table("user_roles")
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_table("users")
