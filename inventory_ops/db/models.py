"""
Pydantic models for the webhook event queue.
Status values and column names are shared with out-of-band consumers.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field
import uuid


class WebhookEventStatus(str, Enum):
    """Lifecycle of a queued webhook event."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NewWebhookEvent(BaseModel):
    """Input for enqueueing a verified webhook delivery."""
    topic: str
    shop: str
    webhook_id: Optional[str] = None
    api_version: Optional[str] = None
    payload: Any = Field(default_factory=dict)


class WebhookEvent(BaseModel):
    """A persisted webhook event."""
    id: str = Field(default_factory=generate_uuid)
    topic: str
    shop: str
    webhook_id: Optional[str] = None
    api_version: Optional[str] = None
    payload: Any = Field(default_factory=dict)
    status: WebhookEventStatus = WebhookEventStatus.PENDING
    attempts: int = Field(default=0, ge=0)
    last_error: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    processed_at: Optional[datetime] = None
