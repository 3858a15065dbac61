"""
AyurCare Backend — Blog Schemas
================================
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BlogResponse(BaseModel):
    id: uuid.UUID
    title: str
    content: str
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    is_published: bool
    author_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BlogCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = None
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_published: bool = False

    model_config = {"str_strip_whitespace": True}


class BlogUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    content: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = None
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_published: Optional[bool] = None

    model_config = {"str_strip_whitespace": True}
