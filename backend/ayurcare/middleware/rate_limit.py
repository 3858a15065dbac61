"""
AyurCare Backend — Rate Limiting Middleware
============================================

What:  Per-IP sliding window limiter in front of every API route.
How:   Keeps a deque of request timestamps per client IP. Timestamps older
       than RATE_LIMIT_WINDOW seconds are dropped on each request; once
       RATE_LIMIT_REQUESTS remain, the request is refused with 429 and a
       Retry-After header computed from the oldest timestamp.

State lives in process memory, so limits are per worker.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ayurcare.config import settings
from ayurcare.exceptions import RateLimitExceededError
from ayurcare.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class SlidingWindowLimiter:
    """
    Pure bookkeeping, no HTTP: `hit()` records a request for `key` at `now`
    and raises RateLimitExceededError when the window is already full.
    """

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def hit(self, key: str, now: Optional[float] = None) -> None:
        now = time.time() if now is None else now
        window_start = now - self.window_seconds
        hits = self._hits[key]
        while hits and hits[0] <= window_start:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = int(hits[0] + self.window_seconds - now) + 1
            raise RateLimitExceededError(retry_after=retry_after)

        hits.append(now)

    def prune(self, now: Optional[float] = None) -> int:
        """Forget keys with no hits inside the window. Returns how many were dropped."""
        now = time.time() if now is None else now
        window_start = now - self.window_seconds
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in stale:
            del self._hits[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._hits)


class RateLimitMiddleware(BaseHTTPMiddleware):

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}
    PRUNE_EVERY = 1000

    def __init__(self, app, max_requests: Optional[int] = None, window_seconds: Optional[int] = None):
        super().__init__(app)
        self.limiter = SlidingWindowLimiter(
            max_requests=max_requests or settings.rate_limit_requests,
            window_seconds=window_seconds or settings.rate_limit_window,
        )
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        try:
            self.limiter.hit(client_ip)
        except RateLimitExceededError as exc:
            logger.warning(
                "Rate limit exceeded for IP %s (%d requests per %ds)",
                client_ip,
                self.limiter.max_requests,
                self.limiter.window_seconds,
            )
            # Raised outside the router, so the app's exception handlers never see it
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": exc.error_code,
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": request_id_var.get("") or None,
                },
                headers=exc.headers,
            )

        self._seen += 1
        if self._seen % self.PRUNE_EVERY == 0:
            dropped = self.limiter.prune()
            if dropped:
                logger.debug("Pruned %d idle rate-limit entries", dropped)

        return await call_next(request)
