"""
AyurCare Backend — Admin User Listing Schemas
==============================================

What:  One row per customer with their complete order history, as shown
       in the admin "Users" tab (expandable order list per user).
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from ayurcare.schemas.order import OrderResponse


class AdminUserResponse(BaseModel):
    id: uuid.UUID
    email: str
    name: str
    phone: str
    address: str
    is_admin: bool
    created_at: datetime
    order_count: int = Field(description="Badge count in the users table")
    orders: List[OrderResponse]
