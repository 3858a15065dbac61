"""
AyurCare Backend — Cart Route Handlers
=======================================

What:  The signed-in user's cart. Every mutation answers with the whole
       refreshed cart (lines, item count, subtotal).

    GET    /api/cart
    POST   /api/cart/items             add / upsert a product
    PATCH  /api/cart/items/{item_id}   change quantity (clamped to ≥ 1)
    DELETE /api/cart/items/{item_id}
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.database import get_db_session
from ayurcare.dependencies import get_current_user
from ayurcare.models.user import User
from ayurcare.schemas.catalog import CartItemAdd, CartItemUpdate, CartResponse
from ayurcare.schemas.common import ErrorResponse
from ayurcare.services.cart_service import cart_service

router = APIRouter(
    prefix="/api/cart",
    tags=["Cart"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)


@router.get("", response_model=CartResponse, summary="Current cart")
async def get_cart(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CartResponse:
    return await cart_service.list_cart(db, user)


@router.post(
    "/items",
    response_model=CartResponse,
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
        409: {"description": "Product out of stock", "model": ErrorResponse},
    },
    summary="Add a product to the cart",
)
async def add_item(
    body: CartItemAdd,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CartResponse:
    return await cart_service.add_item(db, user, body.product_id, body.quantity)


@router.patch(
    "/items/{item_id}",
    response_model=CartResponse,
    responses={404: {"description": "Cart item not found", "model": ErrorResponse}},
    summary="Change the quantity of a cart line",
)
async def update_item(
    item_id: UUID,
    body: CartItemUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CartResponse:
    return await cart_service.update_quantity(db, user, item_id, body.quantity)


@router.delete(
    "/items/{item_id}",
    response_model=CartResponse,
    responses={404: {"description": "Cart item not found", "model": ErrorResponse}},
    summary="Remove a cart line",
)
async def remove_item(
    item_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CartResponse:
    return await cart_service.remove_item(db, user, item_id)
