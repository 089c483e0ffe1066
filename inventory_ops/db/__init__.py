"""
Database package - SQLite only.
"""

from .models import (
    WebhookEvent, NewWebhookEvent, WebhookEventStatus, generate_uuid
)
from .sqlite import SQLiteDatabase

__all__ = [
    "SQLiteDatabase",
    "WebhookEvent",
    "NewWebhookEvent",
    "WebhookEventStatus",
    "generate_uuid",
]
