"""
Product service utilities
"""

from .database import ProductStore

__all__ = ["ProductStore"]
