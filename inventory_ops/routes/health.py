"""
Liveness route.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz():
    """Health check endpoint (no auth required)."""
    return PlainTextResponse(
        "ok",
        headers={"cache-control": "no-store"},
        media_type="text/plain; charset=utf-8",
    )
