"""
Shopify GraphQL Admin API client.
"""

import json
import logging
from typing import Any, Dict, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)


class ShopifyClientError(Exception):
    """Base exception for Shopify client errors."""
    pass


class ShopifyProtocolError(ShopifyClientError):
    """
    The response carried no `data`.

    Covers transport failures, HTTP-level errors and GraphQL errors alike;
    `errors` holds whatever Shopify sent back.
    """

    def __init__(self, message: str, errors: Any = None):
        super().__init__(message)
        self.errors = errors


class GraphQLExecutor(Protocol):
    """Anything that can run a GraphQL document and return its `data`."""

    async def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        ...


class ShopifyClient:
    """
    Async HTTP client for Shopify GraphQL Admin API.

    One request per call, no retries. Callers that want resilience
    wrap execute().
    """

    LOW_THROTTLE_POINTS = 100

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = "2025-01",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Shopify client.

        Args:
            shop_domain: Store domain (e.g., "mystore.myshopify.com")
            access_token: Admin API access token
            api_version: Admin API version segment of the URL
            transport: Optional httpx transport (tests use MockTransport)
        """
        # Clean domain
        domain = shop_domain
        if domain.startswith("https://"):
            domain = domain[8:]
        elif domain.startswith("http://"):
            domain = domain[7:]
        domain = domain.rstrip("/")

        self.shop_domain = domain
        self.access_token = access_token
        self.graphql_url = (
            f"https://{domain}/admin/api/{api_version}/graphql.json"
        )

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(60.0, connect=10.0),
                headers={
                    "Content-Type": "application/json",
                    "X-Shopify-Access-Token": self.access_token,
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Execute a GraphQL query/mutation.

        Args:
            query: GraphQL query or mutation string
            variables: Optional variables for the query

        Returns:
            The 'data' portion of the GraphQL response

        Raises:
            ShopifyProtocolError: If the response has no 'data'
        """
        client = await self._get_client()
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = await client.post(self.graphql_url, json=payload)
        except httpx.RequestError as e:
            raise ShopifyProtocolError(
                f"Shopify GraphQL request failed: {e}", errors=str(e)
            ) from e

        try:
            body = response.json()
        except ValueError:
            raise ShopifyProtocolError(
                f"Shopify GraphQL request failed: HTTP {response.status_code} "
                f"with non-JSON body",
                errors=response.text,
            )

        data = body.get("data") if isinstance(body, dict) else None
        if data is None:
            errors = body.get("errors") if isinstance(body, dict) else None
            raise ShopifyProtocolError(
                f"Shopify GraphQL request failed: {json.dumps(errors or body)}",
                errors=errors or body,
            )

        if body.get("errors"):
            # Partial data: callers read userErrors from the payload itself
            logger.warning(f"GraphQL errors alongside data: {body['errors']}")

        # Log rate limit status if available
        if "extensions" in body and "cost" in body["extensions"]:
            cost = body["extensions"]["cost"]
            throttle = cost.get("throttleStatus", {})
            available = throttle.get("currentlyAvailable", self.LOW_THROTTLE_POINTS)
            if available < self.LOW_THROTTLE_POINTS:
                logger.warning(
                    f"Low rate limit points: {available} available"
                )

        return data

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
