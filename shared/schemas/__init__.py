"""
Shared data schemas for the storefront services
"""

from .health import HealthResponse, ErrorResponse

__all__ = [
    "HealthResponse",
    "ErrorResponse",
]
