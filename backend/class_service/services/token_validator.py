"""
Class Service — OAuth Token Validator Client
=============================================

What:  Asks the external OAuth service whether a bearer token is valid.
How:   POST <validate_url> with `Authorization: Bearer <token>` through a
       long-lived httpx.AsyncClient. Any 2xx answer means valid.
Who:   Used by AuthGatewayMiddleware for every protected request.

Failure mapping:
    2xx                         → True
    any other status            → False
    any failure making the call → AuthServiceUnavailableError

No retry is attempted and no timeout is configured beyond httpx's default;
the caller retries the original request.
"""

import logging
from typing import Optional

import httpx

from class_service.exceptions import AuthServiceUnavailableError

logger = logging.getLogger(__name__)


class TokenValidator:
    def __init__(
        self,
        validate_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.validate_url = validate_url
        self._client = httpx.AsyncClient(transport=transport)

    async def validate(self, token: str) -> bool:
        # The header is passed as raw bytes so that any token shape the
        # gateway extracted is forwarded as-is.
        headers = [(b"Authorization", b"Bearer " + token.encode("utf-8"))]
        try:
            response = await self._client.post(self.validate_url, headers=headers)
        except Exception as e:
            # Transport errors, bad URLs and anything else on the call alike
            logger.error(
                "Error while validating token against oauth gateway at %s: %s",
                self.validate_url,
                str(e),
                exc_info=True,
            )
            raise AuthServiceUnavailableError(
                context={"validate_url": self.validate_url, "error_type": type(e).__name__}
            )

        if not response.is_success:
            logger.warning("Token validation failed with status %d", response.status_code)
        return response.is_success

    async def aclose(self) -> None:
        await self._client.aclose()
