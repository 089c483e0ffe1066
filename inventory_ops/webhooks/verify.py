"""
Shopify webhook signature verification.
"""

import base64
import hashlib
import hmac
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union


HMAC_HEADER = "X-Shopify-Hmac-Sha256"
TOPIC_HEADER = "X-Shopify-Topic"
SHOP_HEADER = "X-Shopify-Shop-Domain"
WEBHOOK_ID_HEADER = "X-Shopify-Webhook-Id"
API_VERSION_HEADER = "X-Shopify-Api-Version"


class ErrorKind(str, Enum):
    """Why a webhook delivery was rejected."""
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    MALFORMED_PAYLOAD = "malformed_payload"


@dataclass(frozen=True)
class WebhookVerified:
    """Signature matched and the required metadata is present."""
    topic: str
    shop: str
    webhook_id: Optional[str] = None
    api_version: Optional[str] = None


@dataclass(frozen=True)
class WebhookRejected:
    """The delivery must be answered with `status` and nothing persisted."""
    status: int
    message: str
    kind: ErrorKind


WebhookAuthResult = Union[WebhookVerified, WebhookRejected]


def _get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup that also works on plain dicts."""
    value = headers.get(name) or headers.get(name.lower())
    if value:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def compute_hmac_base64(secret: str, raw_body: bytes) -> str:
    """Base64 HMAC-SHA256 of the exact request bytes."""
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def signatures_match(expected: str, supplied: str) -> bool:
    """
    Constant-time comparison of two signatures.

    Lengths are compared first; hmac.compare_digest does not stop at
    the first differing byte.
    """
    a = expected.encode("utf-8")
    b = supplied.encode("utf-8")
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a, b)


def verify_webhook(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: Optional[str],
) -> WebhookAuthResult:
    """
    Validate a webhook delivery.

    Args:
        raw_body: Unparsed request body, exactly as received
        headers: Request headers
        secret: Shared app secret (SHOPIFY_API_SECRET)

    Returns:
        WebhookVerified with the delivery metadata, or WebhookRejected
    """
    if not secret:
        return WebhookRejected(500, "Missing SHOPIFY_API_SECRET", ErrorKind.CONFIGURATION)

    supplied = _get_header(headers, HMAC_HEADER)
    if not supplied:
        return WebhookRejected(401, "Missing HMAC header", ErrorKind.AUTHENTICATION)

    expected = compute_hmac_base64(secret, raw_body)
    if not signatures_match(expected, supplied):
        return WebhookRejected(401, "Invalid HMAC", ErrorKind.AUTHENTICATION)

    topic = _get_header(headers, TOPIC_HEADER) or ""
    shop = _get_header(headers, SHOP_HEADER) or ""
    if not topic or not shop:
        return WebhookRejected(400, "Missing topic/shop headers", ErrorKind.VALIDATION)

    return WebhookVerified(
        topic=topic,
        shop=shop,
        webhook_id=_get_header(headers, WEBHOOK_ID_HEADER) or None,
        api_version=_get_header(headers, API_VERSION_HEADER) or None,
    )
