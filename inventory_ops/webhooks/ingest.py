"""
Webhook ingestion: verify, persist, acknowledge.

Business effects are never applied inline; events are queued as
PENDING for an out-of-band worker so the endpoint answers quickly.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ..db import NewWebhookEvent, SQLiteDatabase
from .verify import ErrorKind, WebhookRejected, WebhookVerified, verify_webhook

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookAccepted:
    """The event was durably enqueued."""
    event_id: str
    topic: str
    shop: str
    webhook_id: Optional[str] = None
    api_version: Optional[str] = None


IngestResult = Union[WebhookAccepted, WebhookRejected]


def parse_payload(raw_body: bytes) -> Any:
    """
    Parse a webhook body.

    An empty body is an empty document.

    Raises:
        ValueError: If the body is not UTF-8 encoded JSON
    """
    if not raw_body:
        return {}
    return json.loads(raw_body.decode("utf-8"))


async def ingest_webhook(
    db: SQLiteDatabase,
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: Optional[str],
) -> IngestResult:
    """
    Run one webhook delivery through verification and enqueueing.

    Either a row is committed and WebhookAccepted returned, or nothing
    is written and WebhookRejected returned. Database errors propagate.
    """
    auth = verify_webhook(raw_body, headers, secret)
    if isinstance(auth, WebhookRejected):
        logger.warning(f"Rejected webhook ({auth.status}): {auth.message}")
        return auth

    try:
        payload = parse_payload(raw_body)
    except ValueError as e:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
        logger.warning(f"Rejected webhook {auth.topic} from {auth.shop}: malformed payload: {e}")
        return WebhookRejected(400, "Malformed JSON payload", ErrorKind.MALFORMED_PAYLOAD)

    event_id = await db.insert_webhook_event(
        _new_event(auth, payload)
    )
    logger.info(f"Queued webhook {auth.topic} from {auth.shop} as {event_id}")

    return WebhookAccepted(
        event_id=event_id,
        topic=auth.topic,
        shop=auth.shop,
        webhook_id=auth.webhook_id,
        api_version=auth.api_version,
    )


def _new_event(auth: WebhookVerified, payload: Any) -> NewWebhookEvent:
    return NewWebhookEvent(
        topic=auth.topic,
        shop=auth.shop,
        webhook_id=auth.webhook_id,
        api_version=auth.api_version,
        payload=payload,
    )
