"""
Webhook verification and ingestion.
"""

from .verify import (
    ErrorKind,
    WebhookRejected,
    WebhookVerified,
    compute_hmac_base64,
    signatures_match,
    verify_webhook,
)
from .ingest import WebhookAccepted, ingest_webhook, parse_payload

__all__ = [
    "ErrorKind",
    "WebhookRejected",
    "WebhookVerified",
    "WebhookAccepted",
    "compute_hmac_base64",
    "signatures_match",
    "verify_webhook",
    "ingest_webhook",
    "parse_payload",
]
