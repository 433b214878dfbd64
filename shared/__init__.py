"""
Code shared by the gateway and the product service
"""

__version__ = "1.0.0"
