"""
Health check route for the gateway
"""

from fastapi import APIRouter

from shared.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Gateway liveness; never consults the backend"""
    return HealthResponse(ok=True)
