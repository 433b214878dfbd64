"""
Product data models and schemas
"""

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    # strict: numeric strings and booleans are not prices
    name: str = Field(..., strict=True, min_length=1, max_length=200, description="Product display name")
    price: float = Field(..., strict=True, ge=0, allow_inf_nan=False, description="Non-negative price")


class Product(BaseModel):
    """Stored product as returned by the API"""
    id: str = Field(..., description="Identifier assigned by the store")
    name: str
    price: float
    created_at: datetime

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Product":
        """Build a product from a MongoDB document"""
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            price=doc["price"],
            created_at=doc["created_at"],
        )
