"""
AyurCare Backend — Order Models
================================

What:  ORM models for the `orders` and `order_items` tables.
Who:   Written by OrderService.checkout(); read by order history,
       reorder, and the admin order/user listings.

Lifecycle:
    1. Created at checkout with payment_status='completed' (payment is
       simulated) and delivery_status='processing'
    2. Admin moves delivery_status to 'shipped' and then 'delivered'

order_items.price is the unit price at the time of purchase, so later
catalogue price changes do not rewrite order history.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ayurcare.database import Base, utcnow
from ayurcare.models.catalog import Product
from ayurcare.models.user import User

PAYMENT_COMPLETED = "completed"

DELIVERY_PROCESSING = "processing"
DELIVERY_SHIPPED = "shipped"
DELIVERY_DELIVERED = "delivered"
DELIVERY_STATUSES = (DELIVERY_PROCESSING, DELIVERY_SHIPPED, DELIVERY_DELIVERED)


class Order(Base):
    """A placed order; the header row for its order items."""

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=PAYMENT_COMPLETED,
    )
    delivery_status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DELIVERY_PROCESSING,
        comment="processing, shipped, delivered",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped[Optional[User]] = relationship(lazy="joined")
    items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_orders_user_created_at", "user_id", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, total={self.total_amount}, "
            f"delivery_status='{self.delivery_status}')>"
        )


class OrderItem(Base):
    """One purchased product line with its unit price snapshot."""

    __tablename__ = "order_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
    )
    product_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    order: Mapped[Optional[Order]] = relationship(back_populates="items")
    product: Mapped[Optional[Product]] = relationship(lazy="joined")

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def __repr__(self) -> str:
        return f"<OrderItem(order_id={self.order_id}, product_id={self.product_id}, qty={self.quantity})>"
