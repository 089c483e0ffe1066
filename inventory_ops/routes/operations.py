"""
Bulk operation API routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import settings
from ..dependencies import create_shopify_client, require_admin
from ..processor import OPERATIONS, invalid_intent_result, run_operation
from ..shopify import ShopifyClientError

router = APIRouter(prefix="/api/operations", dependencies=[Depends(require_admin)])


class OperationRequest(BaseModel):
    intent: str = ""
    vendor: Optional[str] = None


@router.get("")
async def list_operations():
    """Available operations and the intent each expects."""
    return {
        name: {"intent": op.intent, "needs_vendor": op.needs_vendor}
        for name, op in OPERATIONS.items()
    }


@router.post("/{name}")
async def start_operation(name: str, body: Optional[OperationRequest] = None):
    """Run an operation and return its summary. Runs to completion."""
    operation = OPERATIONS.get(name)
    if operation is None:
        raise HTTPException(status_code=404, detail="Operation not found")

    # A missing body carries no intent
    body = body or OperationRequest()
    if body.intent != operation.intent:
        return JSONResponse(invalid_intent_result(operation).to_dict(), status_code=400)

    vendor = None
    if operation.needs_vendor:
        vendor = body.vendor or settings.archive_vendor
        if not vendor:
            raise HTTPException(status_code=422, detail="vendor is required")

    try:
        client = create_shopify_client()
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    try:
        async with client:
            result = await run_operation(name, client, vendor=vendor)
    except ShopifyClientError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return result.to_dict()
