"""
AyurCare Backend — Product & Cart Schemas
==========================================

What:  API contracts for the catalogue, the cart, and admin product edits.

Money fields are Decimal; Pydantic serializes them as JSON strings
("12.50") so no precision is lost on the way to the client.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Products
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    price: Decimal
    image_url: Optional[str] = None
    stock_count: int
    in_stock: bool = Field(description="False renders the 'Out of stock' badge")
    ingredients: Optional[str] = None
    benefits: Optional[str] = None
    usage_instructions: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    products: List[ProductResponse]
    total_count: int = Field(description="Number of products matching the listing")


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(default=None, max_length=500)
    stock_count: int = Field(default=0, ge=0)
    ingredients: Optional[str] = None
    benefits: Optional[str] = None
    usage_instructions: Optional[str] = None
    is_active: bool = True

    model_config = {"str_strip_whitespace": True}


class ProductUpdate(BaseModel):
    """Partial update; only fields present in the request body are written."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(default=None, max_length=500)
    stock_count: Optional[int] = Field(default=None, ge=0)
    ingredients: Optional[str] = None
    benefits: Optional[str] = None
    usage_instructions: Optional[str] = None
    is_active: Optional[bool] = None

    model_config = {"str_strip_whitespace": True}


# ══════════════════════════════════════════════════════════════════════════
# Cart
# ══════════════════════════════════════════════════════════════════════════


class CartProduct(BaseModel):
    """The product columns the cart screen needs."""
    id: uuid.UUID
    name: str
    price: Decimal
    image_url: Optional[str] = None
    stock_count: int

    model_config = {"from_attributes": True}


class CartItemResponse(BaseModel):
    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    line_total: Decimal = Field(description="price × quantity")
    product: CartProduct


class CartResponse(BaseModel):
    items: List[CartItemResponse]
    item_count: int = Field(description="Sum of quantities across all lines")
    total: Decimal = Field(description="Cart subtotal; also the order total at checkout")


class CartItemAdd(BaseModel):
    product_id: uuid.UUID
    quantity: int = Field(default=1, ge=1, le=999)


class CartItemUpdate(BaseModel):
    # Values below 1 are clamped to 1 by the service
    quantity: int = Field(le=999)
