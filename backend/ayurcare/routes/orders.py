"""
AyurCare Backend — Order Route Handlers
========================================

What:  Checkout, the dashboard's order history, and reorder.

    POST /api/orders                      checkout the current cart (201)
    GET  /api/orders                      my orders, newest first
    POST /api/orders/{order_id}/reorder   copy an order back into the cart
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.database import get_db_session
from ayurcare.dependencies import get_current_user
from ayurcare.models.user import User
from ayurcare.schemas.catalog import CartResponse
from ayurcare.schemas.common import ErrorResponse
from ayurcare.schemas.order import OrderResponse
from ayurcare.services.order_service import order_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/orders",
    tags=["Orders"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)


@router.post(
    "",
    status_code=201,
    response_model=OrderResponse,
    responses={
        201: {"description": "Order placed", "model": OrderResponse},
        400: {"description": "Cart is empty", "model": ErrorResponse},
        409: {"description": "Not enough stock", "model": ErrorResponse},
    },
    summary="Place an order for the current cart",
    description=(
        "Payment is simulated: the order is created with payment_status "
        "'completed' and delivery_status 'processing', and the cart is emptied."
    ),
)
async def checkout(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    return await order_service.checkout(db, user)


@router.get("", response_model=List[OrderResponse], summary="My order history")
async def list_my_orders(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[OrderResponse]:
    return await order_service.list_my_orders(db, user)


@router.post(
    "/{order_id}/reorder",
    response_model=CartResponse,
    responses={404: {"description": "Order not found", "model": ErrorResponse}},
    summary="Add the items of a past order to the cart",
)
async def reorder(
    order_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CartResponse:
    return await order_service.reorder(db, user, order_id)
