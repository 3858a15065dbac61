"""
AyurCare Backend — Blog Service
================================

What:  Published posts for readers; full post management for admins.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.database import utcnow
from ayurcare.exceptions import NotFoundError
from ayurcare.models.blog import Blog
from ayurcare.models.user import User
from ayurcare.schemas.blog import BlogCreate, BlogResponse, BlogUpdate
from ayurcare.services import apply_partial_update

logger = logging.getLogger(__name__)


class BlogService:

    async def list_published(self, db: AsyncSession) -> List[BlogResponse]:
        result = await db.execute(
            select(Blog)
            .where(Blog.is_published.is_(True))
            .order_by(Blog.created_at.desc())
        )
        return [BlogResponse.model_validate(b) for b in result.scalars().all()]

    async def get_published(self, db: AsyncSession, blog_id: UUID) -> BlogResponse:
        blog = await db.get(Blog, blog_id)
        if blog is None or not blog.is_published:
            raise NotFoundError(resource="blog post", resource_id=str(blog_id))
        return BlogResponse.model_validate(blog)

    # ── Admin ─────────────────────────────────────────────────────────────

    async def list_all(self, db: AsyncSession) -> List[BlogResponse]:
        result = await db.execute(select(Blog).order_by(Blog.created_at.desc()))
        return [BlogResponse.model_validate(b) for b in result.scalars().all()]

    async def create(self, db: AsyncSession, author: User, data: BlogCreate) -> BlogResponse:
        blog = Blog(**data.model_dump(), author_id=author.id)
        db.add(blog)
        await db.flush()
        logger.info("Blog %s created by %s (published=%s)", blog.id, author.id, blog.is_published)
        return BlogResponse.model_validate(blog)

    async def update(self, db: AsyncSession, blog_id: UUID, data: BlogUpdate) -> BlogResponse:
        blog = await self._get(db, blog_id)
        apply_partial_update(
            blog,
            data.model_dump(exclude_unset=True),
            required=("title", "content", "is_published"),
        )
        blog.updated_at = utcnow()
        await db.flush()
        return BlogResponse.model_validate(blog)

    async def delete(self, db: AsyncSession, blog_id: UUID) -> None:
        blog = await self._get(db, blog_id)
        await db.delete(blog)
        await db.flush()
        logger.info("Blog %s deleted", blog_id)

    async def _get(self, db: AsyncSession, blog_id: UUID) -> Blog:
        blog = await db.get(Blog, blog_id)
        if blog is None:
            raise NotFoundError(resource="blog post", resource_id=str(blog_id))
        return blog


# ── Singleton Instance ────────────────────────────────────────────────────
blog_service = BlogService()
