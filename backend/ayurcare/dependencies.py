"""
AyurCare Backend — Auth Dependencies
=====================================

What:  FastAPI dependencies that resolve the signed-in user and gate the
       admin surface.
How:   `HTTPBearer(auto_error=False)` extracts the token so a missing header
       is reported through our own AuthenticationError handler (401 with the
       standard error body) instead of FastAPI's default 403.

Usage:
    @router.get("/cart")
    async def list_cart(user: User = Depends(get_current_user), ...)

    router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.database import get_db_session
from ayurcare.exceptions import AuthenticationError, PermissionDeniedError
from ayurcare.models.user import User
from ayurcare.security import decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(message="Please sign in to continue")

    user_id = decode_access_token(credentials.credentials)
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        # Token outlived its account
        raise AuthenticationError(message="Invalid or expired token")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Single role check for the whole admin surface."""
    if not user.is_admin:
        logger.warning("Non-admin user %s attempted an admin operation", user.id)
        raise PermissionDeniedError(message="Admin access required")
    return user
