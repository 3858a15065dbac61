"""
AyurCare Backend — Product Route Handlers
==========================================

What:  GET /api/products (catalogue) and GET /api/products/{id} (detail).
Who:   Public; no sign-in required.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.database import get_db_session
from ayurcare.schemas.catalog import ProductListResponse, ProductResponse
from ayurcare.schemas.common import ErrorResponse
from ayurcare.services.catalog_service import catalog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Products"])


@router.get(
    "/products",
    response_model=ProductListResponse,
    summary="List active products, newest first",
)
async def list_products(
    response: Response,
    limit: int = Query(default=50, ge=1, le=100, description="Items per page (max 100)"),
    offset: int = Query(default=0, ge=0, description="Number of products to skip"),
    db: AsyncSession = Depends(get_db_session),
) -> ProductListResponse:
    result = await catalog_service.list_products(db=db, limit=limit, offset=offset)
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={404: {"description": "Product not found", "model": ErrorResponse}},
    summary="Get a single product",
)
async def get_product(
    product_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    return await catalog_service.get_product(db=db, product_id=product_id)
