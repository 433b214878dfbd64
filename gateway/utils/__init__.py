"""
Gateway utilities
"""

from .backend_client import BackendClient

__all__ = ["BackendClient"]
