"""
Liveness endpoint.
"""

from fastapi import APIRouter

from card_composer.models.response_models import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/healthz", response_model=HealthResponse)
async def healthz():
    """Health check endpoint."""
    return HealthResponse(status="ok")
