"""
Data models for the product service
"""

from .product import Product, ProductCreate

__all__ = [
    "Product",
    "ProductCreate",
]
