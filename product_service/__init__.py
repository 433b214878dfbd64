"""
Product Service
Internal service owning product records stored in MongoDB
"""

__version__ = "1.0.0"
