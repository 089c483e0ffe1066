"""
Shopify webhook routes.
Verify quickly, enqueue, return 200. Work happens out of band.
"""

import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from ..config import settings
from ..db import SQLiteDatabase
from ..dependencies import get_db
from ..webhooks import WebhookAccepted, WebhookRejected, ingest_webhook
from ..webhooks.ingest import IngestResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks")


async def _ingest(request: Request, db: SQLiteDatabase) -> IngestResult:
    # Starlette caches the body, so verification and parsing read the same bytes
    raw_body = await request.body()
    return await ingest_webhook(db, raw_body, request.headers, settings.shopify_api_secret)


def _respond(result: IngestResult) -> PlainTextResponse:
    if isinstance(result, WebhookRejected):
        return PlainTextResponse(result.message, status_code=result.status)
    return PlainTextResponse("OK", status_code=200)


@router.post("/app/uninstalled")
async def app_uninstalled(request: Request, db: SQLiteDatabase = Depends(get_db)):
    """Queue app/uninstalled; session cleanup is left to the worker."""
    return _respond(await _ingest(request, db))


@router.post("/customers/data_request")
async def customers_data_request(request: Request, db: SQLiteDatabase = Depends(get_db)):
    """GDPR data request."""
    result = await _ingest(request, db)
    if isinstance(result, WebhookAccepted):
        logger.info(
            f"customers/data_request from {result.shop} "
            f"(webhook {result.webhook_id}, api {result.api_version})"
        )
    return _respond(result)


@router.post("/customers/redact")
async def customers_redact(request: Request, db: SQLiteDatabase = Depends(get_db)):
    return _respond(await _ingest(request, db))


@router.post("/shop/redact")
async def shop_redact(request: Request, db: SQLiteDatabase = Depends(get_db)):
    return _respond(await _ingest(request, db))
