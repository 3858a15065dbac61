"""
AyurCare Backend — Catalog Service
===================================

What:  Product listing for the storefront and product management for admins.
Who:   Called by the /api/products and /api/admin/products routes; CartService
       uses `get_active_product()` before adding a line.

Visibility:
    - Public reads only ever see `is_active = true` products
    - Admin reads see every product
    - Listing order is newest first in both cases
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.exceptions import DatabaseError, NotFoundError
from ayurcare.models.catalog import CartItem, Product
from ayurcare.schemas.catalog import (
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from ayurcare.services import apply_partial_update

logger = logging.getLogger(__name__)

_REQUIRED_PRODUCT_FIELDS = ("name", "description", "price", "stock_count", "is_active")


class CatalogService:

    async def list_products(
        self,
        db: AsyncSession,
        limit: int = 50,
        offset: int = 0,
    ) -> ProductListResponse:
        """
        Active products, newest first.

        Query plan:
            SELECT ... WHERE is_active ORDER BY created_at DESC LIMIT :limit OFFSET :offset
            → idx_products_active_created_at
        """
        try:
            result = await db.execute(
                select(Product)
                .where(Product.is_active.is_(True))
                .order_by(Product.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            products = list(result.scalars().all())

            count_result = await db.execute(
                select(func.count(Product.id)).where(Product.is_active.is_(True))
            )
            total_count = count_result.scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error listing products: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve products. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return ProductListResponse(
            products=[ProductResponse.model_validate(p) for p in products],
            total_count=total_count,
        )

    async def get_active_product(self, db: AsyncSession, product_id: UUID) -> Product:
        result = await db.execute(
            select(Product).where(Product.id == product_id, Product.is_active.is_(True))
        )
        product = result.scalar_one_or_none()
        if product is None:
            raise NotFoundError(resource="product", resource_id=str(product_id))
        return product

    async def get_product(self, db: AsyncSession, product_id: UUID) -> ProductResponse:
        product = await self.get_active_product(db, product_id)
        return ProductResponse.model_validate(product)

    # ── Admin ─────────────────────────────────────────────────────────────

    async def list_all_products(self, db: AsyncSession) -> List[ProductResponse]:
        result = await db.execute(select(Product).order_by(Product.created_at.desc()))
        return [ProductResponse.model_validate(p) for p in result.scalars().all()]

    async def create_product(self, db: AsyncSession, data: ProductCreate) -> ProductResponse:
        product = Product(**data.model_dump())
        db.add(product)
        await db.flush()
        logger.info("Product %s created: %s", product.id, product.name)
        return ProductResponse.model_validate(product)

    async def update_product(
        self,
        db: AsyncSession,
        product_id: UUID,
        data: ProductUpdate,
    ) -> ProductResponse:
        product = await self._get_any_product(db, product_id)
        apply_partial_update(
            product,
            data.model_dump(exclude_unset=True),
            required=_REQUIRED_PRODUCT_FIELDS,
        )
        await db.flush()
        logger.info("Product %s updated", product.id)
        return ProductResponse.model_validate(product)

    async def delete_product(self, db: AsyncSession, product_id: UUID) -> None:
        """
        Deletes the product and any cart lines pointing at it.

        Order items keep their row (with a null product) so order history
        and totals survive.
        """
        product = await self._get_any_product(db, product_id)
        await db.execute(delete(CartItem).where(CartItem.product_id == product.id))
        await db.delete(product)
        await db.flush()
        logger.info("Product %s deleted", product_id)

    async def _get_any_product(self, db: AsyncSession, product_id: UUID) -> Product:
        product = await db.get(Product, product_id)
        if product is None:
            raise NotFoundError(resource="product", resource_id=str(product_id))
        return product


# ── Singleton Instance ────────────────────────────────────────────────────
catalog_service = CatalogService()
