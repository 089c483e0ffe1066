"""
Cursor pagination over GraphQL connections.

The query must accept `$first: Int!` and `$after: String` and select
`nodes` plus `pageInfo { hasNextPage endCursor }` on the connection.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional

from inventory_ops.shopify.client import GraphQLExecutor

logger = logging.getLogger(__name__)

PAGE_SIZE = 250


@dataclass
class PageResult:
    """One page of a connection."""

    nodes: List[Dict[str, Any]] = field(default_factory=list)
    has_next_page: bool = False
    end_cursor: Optional[str] = None

    @classmethod
    def from_connection(cls, connection: Dict[str, Any]) -> "PageResult":
        page_info = connection.get("pageInfo") or {}
        return cls(
            nodes=list(connection.get("nodes") or []),
            has_next_page=bool(page_info.get("hasNextPage")),
            end_cursor=page_info.get("endCursor"),
        )


async def iter_pages(
    client: GraphQLExecutor,
    query: str,
    connection: str,
    variables: Optional[Dict[str, Any]] = None,
    page_size: int = PAGE_SIZE,
) -> AsyncIterator[PageResult]:
    """
    Walk a connection page by page until hasNextPage is false.

    There is no page cap; Shopify is trusted to terminate. Remote errors
    propagate and end the walk. Restart by calling again.

    Args:
        client: GraphQL executor
        query: Query document with $first/$after
        connection: Top-level field holding the connection (e.g. "products")
        variables: Extra query variables
        page_size: Value for $first
    """
    after: Optional[str] = None
    pages = 0

    while True:
        data = await client.execute(
            query,
            variables={**(variables or {}), "first": page_size, "after": after},
        )
        page = PageResult.from_connection(data.get(connection) or {})
        pages += 1
        logger.debug(f"Fetched {connection} page {pages}: {len(page.nodes)} nodes")

        yield page

        if not page.has_next_page:
            break
        after = page.end_cursor


async def iter_nodes(
    client: GraphQLExecutor,
    query: str,
    connection: str,
    variables: Optional[Dict[str, Any]] = None,
    page_size: int = PAGE_SIZE,
) -> AsyncIterator[Dict[str, Any]]:
    """Lazily yield every node of a connection in order."""
    async for page in iter_pages(client, query, connection, variables, page_size):
        for node in page.nodes:
            yield node


async def fetch_all(
    client: GraphQLExecutor,
    query: str,
    connection: str,
    variables: Optional[Dict[str, Any]] = None,
    page_size: int = PAGE_SIZE,
) -> List[Dict[str, Any]]:
    """Materialize every node of a connection."""
    return [
        node async for node in iter_nodes(client, query, connection, variables, page_size)
    ]
