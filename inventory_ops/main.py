"""
Shopify Inventory Ops - Main Application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .dependencies import init_dependencies, close_dependencies
from .routes import health_router, webhooks_router, operations_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting Shopify Inventory Ops...")
    await init_dependencies()
    logger.info("Application ready")
    yield
    logger.info("Shutting down...")
    await close_dependencies()


# Create app
app = FastAPI(
    title="Shopify Inventory Ops",
    description="Webhook event queue and bulk inventory maintenance for a Shopify store",
    version="1.0.0",
    lifespan=lifespan
)

# Include routers
app.include_router(health_router)
app.include_router(webhooks_router)
app.include_router(operations_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "inventory_ops.main:app",
        host=settings.host,
        port=settings.port,
        reload=True
    )
