"""
Shared-secret authentication.

Every request, on every path and with any method, must carry the
configured key in the X-API-Key header. The check runs as middleware so
it happens before routing: an unauthenticated client cannot tell a
missing route or a wrong method from a protected one.
"""

import logging
import secrets
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .responses import UnauthorizedResponse

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"

UNAUTHORIZED_MESSAGE = "Unauthorized: Invalid or missing API key"


def is_valid_api_key(provided: Optional[str], expected: str) -> bool:
    """Exact match against the configured key, compared in constant time."""
    if provided is None:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Reject requests whose X-API-Key header does not match the configured key."""

    def __init__(self, app, api_key: str) -> None:
        super().__init__(app)
        self._api_key = api_key

    async def dispatch(self, request: Request, call_next):
        provided = request.headers.get(API_KEY_HEADER)

        if not is_valid_api_key(provided, self._api_key):
            logger.warning(
                "Rejected request with invalid API key",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "key_present": provided is not None,
                }
            )
            body = UnauthorizedResponse(
                status=status.HTTP_401_UNAUTHORIZED,
                message=UNAUTHORIZED_MESSAGE,
            )
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content=body.model_dump(),
            )

        return await call_next(request)
