"""
InkPost Backend: Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py translate them into JSON
       error responses with the right status code.
Who:   Raised by services, routes and the auth dependency.

Exception Hierarchy:
    InkPostError (base)
    ├── ValidationError          → 400 / 411 (status chosen by the raiser)
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    ├── DatabaseError            → 500 (403 for the signup store failure)
    └── UpstreamServiceError     → 500, media host failure

The context dict is logged server-side and is never part of a response body
unless the handler says so explicitly (validation details only).
"""

from typing import Any, Dict, Optional


class InkPostError(Exception):
    """
    Base exception for all InkPost application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(InkPostError):
    """
    Raised when client input fails validation.

    HTTP: 411 for malformed signup/signin/create bodies (the status the
    frontend already understands), 400 for everything else.

    Example response:
        {
            "error": "validation_error",
            "message": "Incorrect input formatting",
            "details": {"errors": [{"loc": ["email"], "msg": "..."}]}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.status_code = status_code


class AuthenticationError(InkPostError):
    """
    Raised when a protected route is called without a valid bearer token.

    HTTP: 401 Unauthorized. The reason (missing header, bad signature,
    expired token) only goes to the log.
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(InkPostError):
    """
    Raised when an authenticated user touches a post they did not write.

    HTTP: 403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to modify this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(InkPostError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services turn that None into
    this exception so routes never branch on it.
    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(InkPostError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic. Constraint
        names, SQL and driver messages are logged server-side only.

    HTTP: 500 by default; signup uses 403 for a rejected insert.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code


class UpstreamServiceError(InkPostError):
    """
    Raised when the external media host rejects or fails an upload.

    The upstream status and body are kept in context for the log.
    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Image upload failed. Please try again later.",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["upstream_status"] = status_code
        super().__init__(message=message, context=ctx)
        self.upstream_status = status_code


class RateLimitExceededError(InkPostError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP: 429 Too Many Requests, with a Retry-After header.
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
