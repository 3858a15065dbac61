"""
AyurCare Backend — User Service (admin listing)
================================================

What:  All customer profiles, newest first, each with its orders and the
       ordered product names.
How:   Two queries (users, then their orders) grouped in memory by user id.
"""

import logging
from collections import defaultdict
from typing import Dict, List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.models.order import Order
from ayurcare.models.user import User
from ayurcare.schemas.order import OrderResponse
from ayurcare.schemas.user import AdminUserResponse
from ayurcare.services.order_service import build_order_response

logger = logging.getLogger(__name__)


class UserService:

    async def list_users_with_orders(self, db: AsyncSession) -> List[AdminUserResponse]:
        users_result = await db.execute(select(User).order_by(User.created_at.desc()))
        users = list(users_result.scalars().all())
        if not users:
            return []

        orders_result = await db.execute(
            select(Order)
            .where(Order.user_id.in_([u.id for u in users]))
            .order_by(Order.created_at.desc())
        )
        orders_by_user: Dict[UUID, List[OrderResponse]] = defaultdict(list)
        for order in orders_result.scalars().all():
            orders_by_user[order.user_id].append(build_order_response(order))

        return [
            AdminUserResponse(
                id=user.id,
                email=user.email,
                name=user.name,
                phone=user.phone,
                address=user.address,
                is_admin=user.is_admin,
                created_at=user.created_at,
                order_count=len(orders_by_user[user.id]),
                orders=orders_by_user[user.id],
            )
            for user in users
        ]


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
