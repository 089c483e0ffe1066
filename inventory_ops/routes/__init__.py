"""
Routes package.
"""

from .health import router as health_router
from .webhooks import router as webhooks_router
from .operations import router as operations_router

__all__ = [
    "health_router",
    "webhooks_router",
    "operations_router",
]
