"""
FastAPI dependency injection.
The database handle is created at startup and handed to routes via Depends.
"""

import hmac
from typing import Optional
from fastapi import Header, HTTPException

from .config import settings
from .db import SQLiteDatabase
from .shopify import ShopifyClient


# Global instance (initialized on startup)
_db: Optional[SQLiteDatabase] = None


async def init_dependencies():
    """Initialize global dependencies. Called on app startup."""
    global _db

    _db = SQLiteDatabase(settings.database_path)
    await _db.initialize()


async def close_dependencies():
    """Close global dependencies. Called on app shutdown."""
    global _db
    if _db:
        await _db.close()
        _db = None


def get_db() -> SQLiteDatabase:
    """Get the database instance."""
    if _db is None:
        raise RuntimeError("Database not initialized")
    return _db


def create_shopify_client() -> ShopifyClient:
    """Build an Admin API client for the configured shop."""
    if not settings.shop_domain or not settings.shopify_access_token:
        raise RuntimeError("SHOP_DOMAIN and SHOPIFY_ACCESS_TOKEN must be set")
    return ShopifyClient(
        settings.shop_domain,
        settings.shopify_access_token,
        api_version=settings.shopify_api_version,
    )


async def require_admin(x_admin_token: Optional[str] = Header(None)):
    """
    Dependency that requires the shared admin token.
    The operations API is disabled when no token is configured.
    """
    if not settings.admin_api_token:
        raise HTTPException(status_code=503, detail="Operations API is disabled")

    supplied = (x_admin_token or "").encode("utf-8")
    if not hmac.compare_digest(supplied, settings.admin_api_token.encode("utf-8")):
        raise HTTPException(status_code=401, detail="Not authenticated")
