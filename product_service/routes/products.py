"""
Product routes
"""

from typing import List

from fastapi import APIRouter, Depends, Request

from product_service.models.product import Product, ProductCreate
from product_service.utils.database import ProductStore
from shared.schemas import ErrorResponse

router = APIRouter()


def get_store(request: Request) -> ProductStore:
    """Dependency to get the product store"""
    return request.app.state.store


@router.get("/products", response_model=List[Product])
async def list_products(store: ProductStore = Depends(get_store)):
    """List all products"""
    return await store.list_products()


@router.post(
    "/products",
    response_model=Product,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_product(product_data: ProductCreate, store: ProductStore = Depends(get_store)):
    """Create a product"""
    return await store.create_product(product_data)
