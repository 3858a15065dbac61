"""
AyurCare Backend — Auth Route Handlers
=======================================

What:  POST /api/auth/signup, POST /api/auth/signin, GET/PATCH /api/auth/me.
Who:   Called by the storefront's sign-in/sign-up tabs and checkout page.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.database import get_db_session
from ayurcare.dependencies import get_current_user
from ayurcare.models.user import User
from ayurcare.schemas.auth import (
    ProfileResponse,
    ProfileUpdate,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from ayurcare.schemas.common import ErrorResponse
from ayurcare.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/signup",
    status_code=201,
    response_model=TokenResponse,
    responses={
        201: {"description": "Account created", "model": TokenResponse},
        409: {"description": "E-mail already registered", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def sign_up(
    body: SignUpRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.sign_up(db, body)


@router.post(
    "/signin",
    response_model=TokenResponse,
    responses={
        200: {"description": "Signed in", "model": TokenResponse},
        401: {"description": "Invalid email or password", "model": ErrorResponse},
    },
    summary="Sign in with e-mail and password",
)
async def sign_in(
    body: SignInRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.sign_in(db, body)


@router.get(
    "/me",
    response_model=ProfileResponse,
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="Current user's profile",
)
async def get_me(user: User = Depends(get_current_user)) -> ProfileResponse:
    return auth_service.get_profile(user)


@router.patch(
    "/me",
    response_model=ProfileResponse,
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="Update name, phone or address",
)
async def update_me(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await auth_service.update_profile(db, user, body)
