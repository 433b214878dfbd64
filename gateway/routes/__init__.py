"""
API routes for the gateway
"""

from . import health, api

__all__ = ["health", "api"]
