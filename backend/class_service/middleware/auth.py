"""
Class Service — OAuth Gateway Middleware
=========================================

What:  Rejects every request that does not carry a token the external OAuth
       service accepts, except for a fixed allow-list of public paths.
How:   Normalizes the Authorization header into a bare token, forwards it to
       the validation endpoint (TokenValidator) and maps the outcome.
Who:   Applied to every request via Starlette middleware.
When:  After RequestContextMiddleware (rejections still carry a request ID).

Decision table (first match wins):
    path is "" or "/" or starts with an allowed prefix → pass through
    no / blank Authorization header                    → 401 Missing Authorization header
    token extraction raised                            → 400 Malformed Authorization header
    no token could be extracted                        → 401 Invalid Authorization header
    validation endpoint unreachable                    → 503 Authentication service unavailable
    validation endpoint answered non-2xx               → 401 Invalid or expired token
    validation endpoint answered 2xx                   → pass through

Token extraction (best effort, in order):
    1. Header looks like a JSON object, or mentions "access_token":
       parse it and read the `access_token` string. Clients regularly paste
       the whole token response instead of the token.
    2. `Bearer <token>` (prefix matched case-insensitively).
    3. Split on commas and spaces; take the first fragment with at least two
       dots (JWT shape), else the first fragment.
"""

import json
import logging
import re
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from class_service.exceptions import (
    AuthenticationError,
    AuthServiceUnavailableError,
    MalformedAuthorizationError,
)
from class_service.middleware.request_context import request_id_var
from class_service.services.token_validator import TokenValidator

logger = logging.getLogger(__name__)

# "/" is handled as an exact match; as a prefix it would match everything.
EXCLUDED_PREFIXES = ("/swagger", "/health", "/api/v1/health", "/favicon", "/openapi")

_BEARER_PREFIX = "bearer "
_FRAGMENT_SEPARATORS = re.compile(r"[, ]")


def is_excluded_path(path: str) -> bool:
    if not path or path == "/":
        return True
    lowered = path.lower()
    return any(lowered.startswith(prefix) for prefix in EXCLUDED_PREFIXES)


def extract_bearer_token(header_value: str) -> Optional[str]:
    """
    Pull a bearer token out of a possibly malformed Authorization header.

    Returns:
        The token, or None when nothing usable is found.
    Raises:
        MalformedAuthorizationError: the header is valid JSON whose shape
            cannot carry a token (not an object, or a non-string
            access_token).
    """
    value = header_value.strip()
    token: Optional[str] = None

    if value.startswith("{") or '"access_token"' in value:
        try:
            document = json.loads(value)
        except json.JSONDecodeError:
            document = None
        else:
            if not isinstance(document, dict):
                raise MalformedAuthorizationError(
                    context={"reason": f"JSON {type(document).__name__} instead of object"}
                )
            candidate = document.get("access_token")
            if candidate is not None and not isinstance(candidate, str):
                raise MalformedAuthorizationError(
                    context={"reason": "access_token is not a string"}
                )
            token = candidate

    if not token:
        if value[:len(_BEARER_PREFIX)].lower() == _BEARER_PREFIX:
            token = value[len(_BEARER_PREFIX):].strip()
        else:
            fragments = [f for f in _FRAGMENT_SEPARATORS.split(value) if f]
            token = next(
                (f for f in fragments if f.count(".") >= 2),
                fragments[0] if fragments else None,
            )

    return token or None


class AuthGatewayMiddleware(BaseHTTPMiddleware):
    """
    Token gate in front of every non-public route.

    The middleware keeps no state between requests; the validator's HTTP
    client is shared and owned by the application lifespan.
    """

    def __init__(self, app, validator: TokenValidator, **kwargs):
        super().__init__(app, **kwargs)
        self.validator = validator

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if is_excluded_path(path):
            return await call_next(request)

        rid = request_id_var.get("")
        # Repeated headers are joined the way proxies fold them
        header = ",".join(request.headers.getlist("authorization"))
        if not header.strip():
            return AuthenticationError("Missing Authorization header").to_response(rid)

        try:
            token = extract_bearer_token(header)
        except Exception:
            logger.error(
                "[%s] Error parsing Authorization header (%d chars)",
                rid,
                len(header),
                exc_info=True,
            )
            return MalformedAuthorizationError().to_response(rid)

        if not token:
            logger.warning("[%s] Could not extract token from Authorization header", rid)
            return AuthenticationError("Invalid Authorization header").to_response(rid)

        try:
            valid = await self.validator.validate(token)
        except AuthServiceUnavailableError as e:
            return e.to_response(rid)

        if not valid:
            logger.warning("[%s] Token rejected for request %s %s", rid, request.method, path)
            return AuthenticationError("Invalid or expired token").to_response(rid)

        return await call_next(request)
