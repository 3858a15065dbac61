"""
AyurCare Backend — Order Service (Checkout & History)
======================================================

What:  Turns a cart into an order, lists order history, re-adds a past
       order to the cart, and lets admins move delivery status forward.
Who:   Called by the /api/orders and /api/admin/orders routes.

Checkout Flow (single transaction, committed by get_db_session):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌────────────┐
    │ Load     │───▶│ Lock & check │───▶│ Insert order │───▶│ Clear cart │
    │ cart     │    │ products     │    │ + items      │    │            │
    └──────────┘    └──────────────┘    └──────────────┘    └────────────┘

    - total_amount = Σ current price × quantity
    - payment is simulated: payment_status='completed' immediately
    - delivery_status starts at 'processing'
    - stock_count is decremented per line; any shortfall aborts the whole
      checkout before anything is written
"""

import logging
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.exceptions import ConflictError, NotFoundError, ValidationError
from ayurcare.models.catalog import CartItem, Product
from ayurcare.models.order import (
    DELIVERY_PROCESSING,
    PAYMENT_COMPLETED,
    Order,
    OrderItem,
)
from ayurcare.models.user import User
from ayurcare.schemas.catalog import CartResponse
from ayurcare.schemas.order import (
    AdminOrderResponse,
    OrderCustomer,
    OrderItemResponse,
    OrderResponse,
)
from ayurcare.services.cart_service import cart_service

logger = logging.getLogger(__name__)


def build_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        total_amount=order.total_amount,
        payment_status=order.payment_status,
        delivery_status=order.delivery_status,
        created_at=order.created_at,
        items=[_build_item(item) for item in order.items],
    )


def _build_item(item: OrderItem) -> OrderItemResponse:
    product = item.product
    return OrderItemResponse(
        id=item.id,
        product_id=item.product_id,
        product_name=product.name if product else None,
        product_image_url=product.image_url if product else None,
        quantity=item.quantity,
        price=item.price,
        line_total=item.line_total,
    )


class OrderService:

    async def checkout(self, db: AsyncSession, user: User) -> OrderResponse:
        """
        Places an order for everything in the user's cart.

        Raises:
            ValidationError: the cart is empty (→ 400)
            ConflictError:   a product is no longer sold or lacks stock (→ 409)
        """
        cart_items = await cart_service.load_items(db, user.id)
        if not cart_items:
            raise ValidationError(message="Your cart is empty", field="cart")

        # Re-read the products under a row lock (ignored by SQLite) so two
        # checkouts cannot both consume the last unit.
        product_ids = [item.product_id for item in cart_items]
        result = await db.execute(
            select(Product)
            .where(Product.id.in_(product_ids))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        products = {product.id: product for product in result.scalars().all()}

        shortages = []
        for item in cart_items:
            product = products.get(item.product_id)
            if product is None or not product.is_active:
                raise ConflictError(
                    message="A product in your cart is no longer available",
                    context={"product_id": str(item.product_id)},
                )
            if product.stock_count < item.quantity:
                shortages.append(
                    {
                        "product_id": str(product.id),
                        "name": product.name,
                        "requested": item.quantity,
                        "available": product.stock_count,
                    }
                )
        if shortages:
            names = ", ".join(s["name"] for s in shortages)
            raise ConflictError(
                message=f"Not enough stock for: {names}",
                context={"shortages": shortages},
            )

        order_items = []
        total = Decimal("0.00")
        for item in cart_items:
            product = products[item.product_id]
            order_items.append(
                OrderItem(
                    product_id=product.id,
                    product=product,
                    quantity=item.quantity,
                    price=product.price,
                )
            )
            total += product.price * item.quantity
            product.stock_count -= item.quantity

        order = Order(
            user_id=user.id,
            user=user,
            total_amount=total,
            payment_status=PAYMENT_COMPLETED,
            delivery_status=DELIVERY_PROCESSING,
            items=order_items,
        )
        db.add(order)
        await db.flush()

        await db.execute(delete(CartItem).where(CartItem.user_id == user.id))
        await db.flush()

        logger.info(
            "Order %s placed by user %s: %d lines, total=%s",
            order.id,
            user.id,
            len(order_items),
            total,
        )
        return build_order_response(order)

    async def list_my_orders(self, db: AsyncSession, user: User) -> List[OrderResponse]:
        result = await db.execute(
            select(Order)
            .where(Order.user_id == user.id)
            .order_by(Order.created_at.desc())
        )
        return [build_order_response(order) for order in result.scalars().all()]

    async def reorder(self, db: AsyncSession, user: User, order_id: UUID) -> CartResponse:
        """
        Puts every line of a past order back into the cart with the ordered
        quantity. Products that were deleted or deactivated are skipped.
        """
        result = await db.execute(
            select(Order).where(Order.id == order_id, Order.user_id == user.id)
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise NotFoundError(resource="order", resource_id=str(order_id))

        for item in order.items:
            product = item.product
            if product is None or not product.is_active:
                logger.info("Reorder %s: skipping unavailable product %s", order_id, item.product_id)
                continue
            await cart_service.upsert_item(db, user.id, product, item.quantity)

        return await cart_service.list_cart(db, user)

    # ── Admin ─────────────────────────────────────────────────────────────

    async def list_all_orders(self, db: AsyncSession) -> List[AdminOrderResponse]:
        result = await db.execute(select(Order).order_by(Order.created_at.desc()))
        responses = []
        for order in result.scalars().all():
            base = build_order_response(order)
            customer = None
            if order.user is not None:
                customer = OrderCustomer(
                    id=order.user.id,
                    name=order.user.name,
                    email=order.user.email,
                )
            responses.append(AdminOrderResponse(**base.model_dump(), customer=customer))
        return responses

    async def update_delivery_status(
        self,
        db: AsyncSession,
        order_id: UUID,
        delivery_status: str,
    ) -> OrderResponse:
        order = await db.get(Order, order_id)
        if order is None:
            raise NotFoundError(resource="order", resource_id=str(order_id))
        order.delivery_status = delivery_status
        await db.flush()
        logger.info("Order %s delivery status → %s", order_id, delivery_status)
        return build_order_response(order)


# ── Singleton Instance ────────────────────────────────────────────────────
order_service = OrderService()
