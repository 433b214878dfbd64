"""
API routes for the product service
"""

from . import health, products

__all__ = ["health", "products"]
