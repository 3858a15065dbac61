"""
AyurCare Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers;
       `app` at module level is what uvicorn serves (ayurcare.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  RequestID → RateLimit → AccessLog → GZip   │
    │               → CORS                                     │
    │                                                          │
    │  Routers:     auth · products · cart · orders · clinic   │
    │               blogs · admin · health                     │
    │                                                          │
    │  Exception Handlers:                                     │
    │    Validation→400  Auth→401  Permission→403  NotFound→404│
    │    Conflict→409    RateLimit→429  Database→500           │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, check configuration, log readiness.
    Shutdown: dispose the database engine.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from ayurcare import __version__
from ayurcare.config import settings
from ayurcare.database import dispose_engine
from ayurcare.exceptions import AyurCareError, NotFoundError
from ayurcare.middleware.logging import RequestLoggingMiddleware
from ayurcare.middleware.rate_limit import RateLimitMiddleware
from ayurcare.middleware.request_id import RequestIDMiddleware, request_id_var
from ayurcare.routes import admin, auth, blogs, cart, clinic, health, orders, products

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, to stdout.

    Format: 2024-01-15T12:00:00 [INFO] ayurcare.services.order_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The access middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("AyurCare Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving; sign-in still works with the development secret
        logger.warning("Configuration warning: %s", str(e))

    if not settings.admin_emails_list:
        logger.warning("ADMIN_EMAILS is empty; nobody will be granted the admin role at sign-up")

    logger.info("Booking slots: %s", ", ".join(settings.time_slots))
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("AyurCare Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Render the shared error envelope; see schemas.common.ErrorResponse."""
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the AyurCare exception hierarchy onto HTTP responses.

    Handler hierarchy:
        AyurCareError           → exc.status_code / exc.error_code, see exceptions.py
                                  (5xx gets a generic message, 404 no details)
        RequestValidationError  → 400 (body/query failed the Pydantic schema)
        Exception (fallback)    → 500, stack trace logged server-side only
    """

    @app.exception_handler(AyurCareError)
    async def handle_ayurcare_error(request: Request, exc: AyurCareError):
        request_id = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                request_id,
                type(exc).__name__,
                exc.message,
                exc.context,
            )
            return error_response(
                exc.status_code,
                exc.error_code,
                "An internal error occurred. Please try again later.",
            )

        if exc.status_code in (400, 403):
            logger.warning(
                "[%s] %s on %s: %s", request_id, exc.error_code, request.url.path, exc.message
            )
        details = None if isinstance(exc, NotFoundError) else exc.context
        return error_response(exc.status_code, exc.error_code, exc.message, details, exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        if field:
            message = f"{field}: {message}"
        return error_response(
            400,
            "validation_error",
            message,
            {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors]},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="AyurCare API",
        description=(
            "Ayurvedic wellness storefront and clinic: product catalogue, cart and "
            "checkout, practitioner appointments, blog, and an admin back office."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Executed in reverse order of addition: RequestID runs first, CORS last
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(products.router)
    app.include_router(cart.router)
    app.include_router(orders.router)
    app.include_router(clinic.router)
    app.include_router(blogs.router)
    app.include_router(admin.router)
    app.include_router(health.router)

    return app


app = create_app()
