"""
Response models shared by the routes and the app's exception handlers.

Every upload outcome, including errors, is returned as an ApiResponse so
clients only ever parse one shape.
"""

from typing import Optional, Sequence

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Upload result envelope."""
    status: int = Field(description="HTTP status code, repeated in the body")
    urls: list[str] = Field(
        default_factory=list,
        description="Public URLs of stored images"
    )
    message: str = Field(description="Human-readable summary")
    failed: list[str] = Field(
        default_factory=list,
        description='Per-file failures as "<filename>: <reason>"'
    )


class HealthResponse(BaseModel):
    """Liveness check response."""
    success: bool
    message: str


class UnauthorizedResponse(BaseModel):
    status: int
    message: str


def api_response(
    status_code: int,
    message: str,
    urls: Optional[Sequence[str]] = None,
    failed: Optional[Sequence[str]] = None,
) -> JSONResponse:
    """Build a JSONResponse carrying an ApiResponse body."""
    body = ApiResponse(
        status=int(status_code),
        urls=list(urls or []),
        message=message,
        failed=list(failed or []),
    )
    return JSONResponse(status_code=body.status, content=body.model_dump())
