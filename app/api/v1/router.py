"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Every
communications route requires the internal access token.
"""

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import require_internal_token
from app.api.v1.endpoints import communications, health
from app.schemas.communication import ErrorResponse

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    communications.router,
    prefix="/communications",
    tags=["communications"],
    dependencies=[Depends(require_internal_token)],
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
