"""
Health check endpoint.

Liveness only: it answers as long as the process is up and the caller
holds a valid API key. Storage is not contacted.
"""

from fastapi import APIRouter, status

from ..responses import HealthResponse

router = APIRouter()


@router.get(
    "/",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(success=True, message="successfully connect")
