"""
AyurCare Backend — Order Schemas
=================================

What:  Order history, checkout result, and the admin order listing.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

DeliveryStatus = Literal["processing", "shipped", "delivered"]


class OrderItemResponse(BaseModel):
    id: uuid.UUID
    product_id: Optional[uuid.UUID] = None
    product_name: Optional[str] = Field(
        default=None,
        description="Null when the product has since been deleted",
    )
    product_image_url: Optional[str] = None
    quantity: int
    price: Decimal = Field(description="Unit price at the time of purchase")
    line_total: Decimal


class OrderResponse(BaseModel):
    id: uuid.UUID
    total_amount: Decimal
    payment_status: str
    delivery_status: str
    created_at: datetime
    items: List[OrderItemResponse]


class OrderCustomer(BaseModel):
    id: uuid.UUID
    name: str
    email: str


class AdminOrderResponse(OrderResponse):
    """Admin listing row: the order plus who placed it."""
    customer: Optional[OrderCustomer] = None


class DeliveryStatusUpdate(BaseModel):
    delivery_status: DeliveryStatus
