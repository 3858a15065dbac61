"""
AyurCare Backend — Cart Service
================================

What:  The signed-in user's cart: list, add, change quantity, remove.
How:   Every mutation returns the refreshed cart so the client can render
       it without a second request.

Rules:
    - One row per (user, product). Adding a product that is already in the
      cart replaces the row's quantity (the storefront's "upsert on
      user_id,product_id").
    - Quantities are at least 1; lower values are clamped.
    - A product must be active and in stock to be added.
    - Rows of other users are reported as not found.
"""

import logging
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.exceptions import ConflictError, NotFoundError
from ayurcare.models.catalog import CartItem, Product
from ayurcare.models.user import User
from ayurcare.schemas.catalog import CartItemResponse, CartProduct, CartResponse
from ayurcare.services.catalog_service import catalog_service

logger = logging.getLogger(__name__)


class CartService:

    async def list_cart(self, db: AsyncSession, user: User) -> CartResponse:
        items = await self.load_items(db, user.id)
        return self.build_cart_response(items)

    async def add_item(
        self,
        db: AsyncSession,
        user: User,
        product_id: UUID,
        quantity: int = 1,
    ) -> CartResponse:
        """
        Raises:
            NotFoundError: product missing or inactive (→ 404)
            ConflictError: product out of stock (→ 409)
        """
        product = await catalog_service.get_active_product(db, product_id)
        if not product.in_stock:
            raise ConflictError(
                message=f"'{product.name}' is out of stock",
                context={"product_id": str(product.id)},
            )

        await self.upsert_item(db, user.id, product, quantity)
        logger.info("User %s added product %s (qty=%d) to cart", user.id, product.id, quantity)
        return await self.list_cart(db, user)

    async def update_quantity(
        self,
        db: AsyncSession,
        user: User,
        item_id: UUID,
        quantity: int,
    ) -> CartResponse:
        item = await self._get_own_item(db, user.id, item_id)
        item.quantity = max(1, quantity)
        await db.flush()
        return await self.list_cart(db, user)

    async def remove_item(self, db: AsyncSession, user: User, item_id: UUID) -> CartResponse:
        item = await self._get_own_item(db, user.id, item_id)
        await db.delete(item)
        await db.flush()
        logger.info("User %s removed cart item %s", user.id, item_id)
        return await self.list_cart(db, user)

    # ── Shared with OrderService ──────────────────────────────────────────

    async def load_items(self, db: AsyncSession, user_id: UUID) -> List[CartItem]:
        result = await db.execute(
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        # Lines whose product row has vanished cannot be priced
        return [item for item in result.scalars().all() if item.product is not None]

    async def upsert_item(
        self,
        db: AsyncSession,
        user_id: UUID,
        product: Product,
        quantity: int,
    ) -> CartItem:
        result = await db.execute(
            select(CartItem).where(
                CartItem.user_id == user_id,
                CartItem.product_id == product.id,
            )
        )
        item = result.scalar_one_or_none()
        if item is None:
            item = CartItem(
                user_id=user_id,
                product_id=product.id,
                product=product,
                quantity=max(1, quantity),
            )
            db.add(item)
        else:
            item.quantity = max(1, quantity)
        await db.flush()
        return item

    def build_cart_response(self, items: List[CartItem]) -> CartResponse:
        lines = [
            CartItemResponse(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                line_total=item.product.price * item.quantity,
                product=CartProduct.model_validate(item.product),
            )
            for item in items
        ]
        return CartResponse(
            items=lines,
            item_count=sum(line.quantity for line in lines),
            total=sum((line.line_total for line in lines), Decimal("0.00")),
        )

    async def _get_own_item(self, db: AsyncSession, user_id: UUID, item_id: UUID) -> CartItem:
        result = await db.execute(
            select(CartItem).where(CartItem.id == item_id, CartItem.user_id == user_id)
        )
        item = result.scalar_one_or_none()
        if item is None:
            raise NotFoundError(resource="cart item", resource_id=str(item_id))
        return item


# ── Singleton Instance ────────────────────────────────────────────────────
cart_service = CartService()
