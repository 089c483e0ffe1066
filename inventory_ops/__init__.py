"""
Shopify inventory operations service.
"""

__version__ = "1.0.0"
