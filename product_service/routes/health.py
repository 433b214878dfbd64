"""
Health check route for the product service
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from product_service.routes.products import get_store
from product_service.utils.database import ProductStore
from shared.schemas import HealthResponse
from shared.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
async def health_check(store: ProductStore = Depends(get_store)):
    """Healthy only while the MongoDB connection answers"""
    if await store.ping():
        return HealthResponse(ok=True)
    logger.warning("Health check failed: database unreachable")
    return JSONResponse(status_code=503, content=HealthResponse(ok=False).model_dump())
