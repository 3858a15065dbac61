"""
AyurCare Backend — Blog Route Handlers
=======================================

What:  GET /api/blogs and GET /api/blogs/{id}; published posts only.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.database import get_db_session
from ayurcare.schemas.blog import BlogResponse
from ayurcare.schemas.common import ErrorResponse
from ayurcare.services.blog_service import blog_service

router = APIRouter(prefix="/api/blogs", tags=["Blog"])


@router.get("", response_model=List[BlogResponse], summary="Published posts, newest first")
async def list_blogs(db: AsyncSession = Depends(get_db_session)) -> List[BlogResponse]:
    return await blog_service.list_published(db)


@router.get(
    "/{blog_id}",
    response_model=BlogResponse,
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Get a published post",
)
async def get_blog(blog_id: UUID, db: AsyncSession = Depends(get_db_session)) -> BlogResponse:
    return await blog_service.get_published(db, blog_id)
