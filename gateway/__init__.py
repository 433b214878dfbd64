"""
Gateway Service
Public entry point that answers its own health check and forwards /api traffic
to the product service
"""

__version__ = "1.0.0"
