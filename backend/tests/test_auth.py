"""
AyurCare Backend — Auth Tests
==============================

What we test:
    ✅ Sign-up creates the account, lower-cases the e-mail, returns a token
    ✅ ADMIN_EMAILS receive the admin role at sign-up
    ✅ Duplicate e-mail → 409, short password → 400
    ✅ Sign-in with the same message for unknown e-mail and wrong password
    ✅ Passwords are stored as typed, surrounding spaces included
    ✅ /api/auth/me requires a valid bearer token for an existing user
    ✅ Profile update, including rejection of an explicit null name
    ✅ AuthService.sign_in against a mocked session
"""

import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy import delete

from ayurcare.exceptions import AuthenticationError
from ayurcare.models import User, UserRole
from ayurcare.schemas.auth import SignInRequest
from ayurcare.security import hash_password
from ayurcare.services.auth_service import INVALID_CREDENTIALS, AuthService
from conftest import ADMIN_EMAIL, CUSTOMER_EMAIL, PASSWORD, sign_up


class TestSignUp:

    @pytest.mark.asyncio
    async def test_sign_up_returns_token_and_profile(self, test_client):
        response = await test_client.post(
            "/api/auth/signup",
            json={
                "name": "  Ravi Kumar ",
                "email": "Ravi.Kumar@Example.com",
                "password": PASSWORD,
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert body["expires_in"] > 0
        assert body["user"]["email"] == "ravi.kumar@example.com"
        assert body["user"]["name"] == "Ravi Kumar"
        assert body["user"]["phone"] == ""
        assert body["user"]["is_admin"] is False

    @pytest.mark.asyncio
    async def test_configured_admin_email_gets_admin_role(self, test_client):
        account = await sign_up(test_client, ADMIN_EMAIL)
        assert account["user"]["is_admin"] is True

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, test_client, customer):
        response = await test_client.post(
            "/api/auth/signup",
            json={"name": "Someone Else", "email": CUSTOMER_EMAIL.upper(), "password": PASSWORD},
        )

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "conflict"
        assert "already registered" in body["message"]

    @pytest.mark.asyncio
    async def test_short_password_is_rejected(self, test_client):
        response = await test_client.post(
            "/api/auth/signup",
            json={"name": "Short", "email": "short@example.com", "password": "abc"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "password" in body["message"]

    @pytest.mark.asyncio
    async def test_invalid_email_is_rejected(self, test_client):
        response = await test_client.post(
            "/api/auth/signup",
            json={"name": "Nobody", "email": "not-an-email", "password": PASSWORD},
        )
        assert response.status_code == 400


class TestSignIn:

    @pytest.mark.asyncio
    async def test_sign_in_with_correct_password(self, test_client, customer):
        response = await test_client.post(
            "/api/auth/signin",
            json={"email": CUSTOMER_EMAIL, "password": PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["id"] == customer["user"]["id"]
        assert body["access_token"]

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, test_client, customer):
        wrong_password = await test_client.post(
            "/api/auth/signin",
            json={"email": CUSTOMER_EMAIL, "password": "not-the-password"},
        )
        unknown_email = await test_client.post(
            "/api/auth/signin",
            json={"email": "ghost@example.com", "password": PASSWORD},
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json()["message"] == INVALID_CREDENTIALS
        assert unknown_email.json()["message"] == INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_password_whitespace_is_kept(self, test_client):
        padded = " lotus 123 "
        signed_up = await test_client.post(
            "/api/auth/signup",
            json={"name": " Nila ", "email": "nila@example.com", "password": padded},
        )
        assert signed_up.status_code == 201
        assert signed_up.json()["user"]["name"] == "Nila"

        signed_in = await test_client.post(
            "/api/auth/signin",
            json={"email": "nila@example.com", "password": padded},
        )
        trimmed = await test_client.post(
            "/api/auth/signin",
            json={"email": "nila@example.com", "password": padded.strip()},
        )

        assert signed_in.status_code == 200
        assert trimmed.status_code == 401


class TestProfile:

    @pytest.mark.asyncio
    async def test_me_requires_token(self, test_client):
        response = await test_client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_me_rejects_garbage_token(self, test_client):
        response = await test_client.get(
            "/api/auth/me",
            headers={"Authorization": "Bearer not.a.jwt"},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_of_deleted_user_is_rejected(self, test_client, db_session, customer):
        user_id = uuid.UUID(customer["user"]["id"])
        await db_session.execute(delete(UserRole).where(UserRole.user_id == user_id))
        await db_session.execute(delete(User).where(User.id == user_id))
        await db_session.commit()

        response = await test_client.get("/api/auth/me", headers=customer["headers"])

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    @pytest.mark.asyncio
    async def test_me_returns_profile(self, test_client, customer):
        response = await test_client.get("/api/auth/me", headers=customer["headers"])

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == CUSTOMER_EMAIL
        assert body["address"] == "12 Lotus Lane, Pune"

    @pytest.mark.asyncio
    async def test_update_profile_changes_only_sent_fields(self, test_client, customer):
        response = await test_client.patch(
            "/api/auth/me",
            headers=customer["headers"],
            json={"phone": "9123456780"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["phone"] == "9123456780"
        assert body["name"] == customer["user"]["name"]

        again = await test_client.get("/api/auth/me", headers=customer["headers"])
        assert again.json()["phone"] == "9123456780"

    @pytest.mark.asyncio
    async def test_update_profile_rejects_null_name(self, test_client, customer):
        response = await test_client.patch(
            "/api/auth/me",
            headers=customer["headers"],
            json={"name": None},
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "name"


class TestAuthServiceUnit:
    """AuthService.sign_in with the session mocked out."""

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_sign_in_unknown_email(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(AuthenticationError) as exc_info:
            await self.service.sign_in(
                mock_db_session,
                SignInRequest(email="ghost@example.com", password=PASSWORD),
            )
        assert exc_info.value.message == INVALID_CREDENTIALS

    @pytest.mark.asyncio
    async def test_sign_in_wrong_password(self, mock_db_session):
        user = MagicMock()
        user.password_hash = hash_password("the-real-password")
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = user
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(AuthenticationError):
            await self.service.sign_in(
                mock_db_session,
                SignInRequest(email=CUSTOMER_EMAIL, password="a-wrong-guess"),
            )
