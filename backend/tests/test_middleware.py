"""
AyurCare Backend — Middleware & Health Tests
=============================================

What we test:
    ✅ Sliding window limiter: allows up to the limit, refuses with a
       Retry-After, recovers once the window slides, prunes idle clients
    ✅ The rate limit middleware returns the standard 429 envelope
    ✅ X-Request-ID is generated, or echoed when the client sends one
    ✅ Error bodies carry the same request ID
    ✅ /health reports database connectivity
"""

import logging
import uuid

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from ayurcare.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)
from ayurcare.middleware.logging import level_for_status
from ayurcare.middleware.rate_limit import RateLimitMiddleware, SlidingWindowLimiter
from ayurcare.middleware.request_id import RequestIDMiddleware


class TestSlidingWindowLimiter:

    def test_allows_up_to_limit_then_refuses(self):
        limiter = SlidingWindowLimiter(max_requests=3, window_seconds=60)
        for second in range(3):
            limiter.hit("10.0.0.1", now=1000.0 + second)

        with pytest.raises(RateLimitExceededError) as exc_info:
            limiter.hit("10.0.0.1", now=1010.0)

        # Oldest hit at 1000 leaves the window at 1060
        assert exc_info.value.retry_after == 51
        assert exc_info.value.context["retry_after"] == 51

    def test_clients_are_counted_separately(self):
        limiter = SlidingWindowLimiter(max_requests=1, window_seconds=60)
        limiter.hit("10.0.0.1", now=1000.0)
        limiter.hit("10.0.0.2", now=1000.0)

    def test_window_slides(self):
        limiter = SlidingWindowLimiter(max_requests=2, window_seconds=60)
        limiter.hit("10.0.0.1", now=1000.0)
        limiter.hit("10.0.0.1", now=1030.0)

        limiter.hit("10.0.0.1", now=1061.0)

        with pytest.raises(RateLimitExceededError):
            limiter.hit("10.0.0.1", now=1062.0)

    def test_prune_forgets_idle_clients(self):
        limiter = SlidingWindowLimiter(max_requests=5, window_seconds=60)
        limiter.hit("10.0.0.1", now=1000.0)
        limiter.hit("10.0.0.2", now=1050.0)

        assert limiter.prune(now=1070.0) == 1
        assert len(limiter) == 1


def build_limited_app(max_requests: int) -> FastAPI:
    limited = FastAPI()

    @limited.get("/ping")
    async def ping():
        return {"ok": True}

    @limited.get("/health")
    async def health():
        return {"status": "healthy"}

    limited.add_middleware(RateLimitMiddleware, max_requests=max_requests, window_seconds=60)
    limited.add_middleware(RequestIDMiddleware)
    return limited


class TestRateLimitMiddleware:

    @pytest.mark.asyncio
    async def test_returns_429_with_retry_after(self):
        transport = ASGITransport(app=build_limited_app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            refused = await client.get("/ping")

        assert refused.status_code == 429
        assert int(refused.headers["Retry-After"]) > 0
        body = refused.json()
        assert body["error"] == "rate_limit_exceeded"
        assert body["details"]["retry_after"] == int(refused.headers["Retry-After"])
        assert body["request_id"] == refused.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self):
        transport = ASGITransport(app=build_limited_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            for _ in range(5):
                assert (await client.get("/health")).status_code == 200


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_missing(self, test_client):
        response = await test_client.get("/api/products")

        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_id_is_echoed_into_errors(self, test_client):
        response = await test_client.get("/api/cart", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"


class TestAccessLogLevels:

    def test_levels_follow_status_class(self):
        assert level_for_status(200) == logging.INFO
        assert level_for_status(302) == logging.INFO
        assert level_for_status(404) == logging.WARNING
        assert level_for_status(503) == logging.ERROR


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy_with_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["version"] == "1.0.0"


class TestErrorEnvelope:

    def test_exception_classes_carry_status_and_headers(self):
        assert NotFoundError(resource="order", resource_id="abc").status_code == 404
        assert AuthenticationError().headers == {"WWW-Authenticate": "Bearer"}
        assert RateLimitExceededError(retry_after=7).headers == {"Retry-After": "7"}
        assert DatabaseError().error_code == "server_error"
        assert ValidationError().message == "Validation failed"

    @pytest.mark.asyncio
    async def test_not_found_has_no_details(self, test_client):
        response = await test_client.get(f"/api/products/{uuid.uuid4()}")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert "details" not in body
        assert body["request_id"] == response.headers["X-Request-ID"]
