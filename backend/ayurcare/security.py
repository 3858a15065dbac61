"""
AyurCare Backend — Password Hashing & Access Tokens
====================================================

What:  Password hashing (passlib) and JWT access tokens (python-jose).
Who:   AuthService issues tokens at sign-up/sign-in; the `get_current_user`
       dependency decodes them on every authenticated request.

Token format:
    HS256 JWT with claims:
        sub: user id (UUID string)
        exp: expiry (now + ACCESS_TOKEN_EXPIRE_MINUTES)
        iat: issued-at
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from ayurcare.config import settings
from ayurcare.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# pbkdf2_sha256 is implemented by passlib itself, so no native backend is needed
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Returns False for a malformed stored hash instead of raising."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error("Password verification error: %s", e)
        return False


def create_access_token(
    user_id: UUID,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    claims: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID:
    """
    Validates a token and returns the user id it was issued for.

    Raises:
        AuthenticationError: bad signature, expired, or missing/invalid `sub`.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.info("Rejected access token: %s", e)
        raise AuthenticationError(message="Invalid or expired token") from e

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError(message="Invalid or expired token")
    try:
        return UUID(subject)
    except ValueError as e:
        raise AuthenticationError(message="Invalid or expired token") from e
