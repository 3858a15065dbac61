"""
AyurCare Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the failures a client can hit.
How:   Each class declares its HTTP status, a machine-readable error code and
       a default message. main.register_exception_handlers renders any of
       them as the shared JSON error envelope, so adding a new failure mode
       is a new subclass and nothing else.
Who:   Raised by services and dependencies; caught by the global handlers.

Exception Hierarchy:
    AyurCareError (base)         → 500 server_error
    ├── ValidationError          → 400 validation_error
    ├── AuthenticationError      → 401 unauthorized (+ WWW-Authenticate)
    ├── PermissionDeniedError    → 403 forbidden
    ├── NotFoundError            → 404 not_found
    ├── ConflictError            → 409 conflict
    ├── RateLimitExceededError   → 429 rate_limit_exceeded (+ Retry-After)
    └── DatabaseError            → 500 server_error
"""

from typing import Any, Dict, Optional


class AyurCareError(Exception):
    """
    Base exception for all AyurCare application errors.

    Attributes:
        message:  Client-safe description, returned as `message` in the envelope
        context:  Extra structured detail, returned as `details` for 4xx errors
    """

    status_code = 500
    error_code = "server_error"
    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.context = dict(context or {})
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        """Extra response headers for this error, if any."""
        return None


class ValidationError(AyurCareError):
    """
    Raised when client input breaks a business rule.

    Schema problems (missing fields, wrong types) are rejected by FastAPI
    before a service runs and are rendered with the same status; this class
    covers rules that need the database or the clock, such as an empty cart
    at checkout or a booking date in the past.

    Example response:
        {
            "error": "validation_error",
            "message": "Appointments cannot be booked in the past",
            "details": {"field": "appointment_date"}
        }
    """

    status_code = 400
    error_code = "validation_error"
    default_message = "Validation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.field = field
        if field:
            self.context["field"] = field


class AuthenticationError(AyurCareError):
    """
    Raised when the caller is not signed in or the credentials are wrong.

    Sign-in failures use one message for an unknown e-mail and a wrong
    password so the response does not reveal which accounts exist.
    """

    status_code = 401
    error_code = "unauthorized"
    default_message = "Authentication required"

    @property
    def headers(self) -> Dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class PermissionDeniedError(AyurCareError):
    """Signed in, but without the role the endpoint requires."""

    status_code = 403
    error_code = "forbidden"
    default_message = "You do not have permission to perform this action"


class NotFoundError(AyurCareError):
    """
    Raised when a requested row does not exist.

    Rows owned by another user are reported the same way, so their
    existence is not leaked. The handler returns only the message.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        else:
            message = f"The requested {resource} was not found"
        super().__init__(message, context)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(AyurCareError):
    """
    The request clashes with the current data: e-mail already registered,
    product out of stock, booking slot already taken.
    """

    status_code = 409
    error_code = "conflict"
    default_message = "The request conflicts with the current state of the resource"


class RateLimitExceededError(AyurCareError):
    """Per-IP request budget used up; `retry_after` is in whole seconds."""

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests.",
            context,
        )
        self.retry_after = retry_after
        self.context["retry_after"] = retry_after

    @property
    def headers(self) -> Dict[str, str]:
        return {"Retry-After": str(self.retry_after)}


class DatabaseError(AyurCareError):
    """
    Raised when a database operation fails unexpectedly.

    The client only ever sees a generic message; the context is logged.
    """

    default_message = "A database error occurred. Please try again later."
