"""
AyurCare Backend — Auth Service
================================

What:  Account creation, credential checks, and profile reads/updates.
How:   Passwords are hashed with passlib; successful sign-up and sign-in
       both return a JWT access token together with the profile.
Who:   Called by the /api/auth routes.

Admin bootstrap:
    E-mails listed in ADMIN_EMAILS receive a `user_roles` row with
    role='admin' when they sign up. There is no other way to grant the role
    through the API.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.config import settings
from ayurcare.exceptions import AuthenticationError, ConflictError
from ayurcare.models.user import ROLE_ADMIN, User, UserRole
from ayurcare.schemas.auth import (
    ProfileResponse,
    ProfileUpdate,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from ayurcare.security import create_access_token, hash_password, verify_password
from ayurcare.services import apply_partial_update

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """
    Responsibilities:
        - sign_up(): create the user (and admin role when configured)
        - sign_in(): verify credentials
        - get_profile() / update_profile(): the profile shown at checkout
    """

    async def sign_up(self, db: AsyncSession, data: SignUpRequest) -> TokenResponse:
        """
        Raises:
            ConflictError: the e-mail is already registered (→ 409)
        """
        email = data.email.lower()

        existing = await db.execute(select(User.id).where(User.email == email))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(
                message="This email is already registered. Please sign in instead.",
                context={"field": "email"},
            )

        roles = []
        if email in settings.admin_emails_list:
            roles.append(UserRole(role=ROLE_ADMIN))

        user = User(
            email=email,
            password_hash=hash_password(data.password),
            name=data.name,
            phone=data.phone,
            address=data.address,
            roles=roles,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            # Concurrent sign-up with the same e-mail won the unique index
            logger.info("Duplicate sign-up for %s: %s", email, type(e).__name__)
            raise ConflictError(
                message="This email is already registered. Please sign in instead.",
                context={"field": "email"},
            ) from e

        logger.info("User %s signed up (admin=%s)", user.id, user.is_admin)
        return self._token_response(user)

    async def sign_in(self, db: AsyncSession, data: SignInRequest) -> TokenResponse:
        """
        Raises:
            AuthenticationError: unknown e-mail or wrong password (→ 401)
        """
        result = await db.execute(select(User).where(User.email == data.email.lower()))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(data.password, user.password_hash):
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        logger.info("User %s signed in", user.id)
        return self._token_response(user)

    def get_profile(self, user: User) -> ProfileResponse:
        return ProfileResponse.model_validate(user)

    async def update_profile(
        self,
        db: AsyncSession,
        user: User,
        data: ProfileUpdate,
    ) -> ProfileResponse:
        apply_partial_update(
            user,
            data.model_dump(exclude_unset=True),
            required=("name", "phone", "address"),
        )
        await db.flush()
        return ProfileResponse.model_validate(user)

    def _token_response(self, user: User) -> TokenResponse:
        return TokenResponse(
            access_token=create_access_token(user.id),
            expires_in=settings.access_token_expire_minutes * 60,
            user=ProfileResponse.model_validate(user),
        )


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
