"""
Class Service — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the error scenarios of the service.
How:   Each exception carries a user-facing message, an optional context dict
       and the HTTP status/error code it maps to. Global handlers in main.py
       turn route-level exceptions into JSON responses; the auth gateway
       builds its responses directly from the same classes because it runs
       outside FastAPI's exception handling.

Exception Hierarchy:
    ClassServiceError (base)                → 500
    ├── ValidationError                     → 400 Bad Request
    ├── NotFoundError                       → 404 Not Found
    ├── DatabaseError                       → 500 Internal Server Error
    ├── AuthenticationError                 → 401 Unauthorized
    ├── MalformedAuthorizationError         → 400 Bad Request
    └── AuthServiceUnavailableError         → 503 Service Unavailable
"""

from typing import Any, Dict, Optional

from starlette.responses import JSONResponse


class ClassServiceError(Exception):
    """
    Base exception for all Class Service errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where noted)
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def to_response(self, request_id: str = "", include_details: bool = False) -> JSONResponse:
        """Render the exception with the service's JSON error envelope."""
        content: Dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if include_details and self.context:
            content["details"] = self.context
        content["request_id"] = request_id
        return JSONResponse(status_code=self.status_code, content=content)


class ValidationError(ClassServiceError):
    """
    Raised when client input cannot be processed.

    When:    Missing body, empty patch map, duplicate identifiers.
    HTTP:    400 Bad Request
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ClassServiceError):
    """
    Raised when a class, or an exam inside a class, does not exist.

    Repositories return None for missing documents; the service layer converts
    that into this exception so routes never check for None themselves.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(ClassServiceError):
    """
    Raised when the document store fails unexpectedly.

    The message returned to the client is always generic; driver details are
    logged server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(ClassServiceError):
    """Missing, unextractable, or rejected bearer token (401)."""

    status_code = 401
    error_code = "unauthorized"

    def __init__(self, message: str = "Unauthorized", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class MalformedAuthorizationError(ClassServiceError):
    """The Authorization header could not be parsed at all (400)."""

    status_code = 400
    error_code = "bad_request"

    def __init__(
        self,
        message: str = "Malformed Authorization header",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthServiceUnavailableError(ClassServiceError):
    """
    The token validation endpoint could not be reached.

    HTTP:    503 Service Unavailable. Distinct from 401: the caller's token may
             be perfectly valid, the trust infrastructure is what failed.
    """

    status_code = 503
    error_code = "service_unavailable"

    def __init__(
        self,
        message: str = "Authentication service unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
