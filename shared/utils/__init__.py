"""
Shared utilities for the storefront services

This package contains common utilities used by the gateway and the product service.
"""

from .logger import setup_logging, get_logger, RequestLogger, request_timer

__all__ = [
    "setup_logging",
    "get_logger",
    "RequestLogger",
    "request_timer",
]
