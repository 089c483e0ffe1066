"""
Shopify API module.
"""

from inventory_ops.shopify.client import (
    GraphQLExecutor,
    ShopifyClient,
    ShopifyClientError,
    ShopifyProtocolError,
)
from inventory_ops.shopify.pagination import (
    PAGE_SIZE,
    PageResult,
    fetch_all,
    iter_nodes,
    iter_pages,
)
from inventory_ops.shopify.batch_update import (
    DispatchSummary,
    chunked,
    dispatch_chunks,
)
from inventory_ops.shopify.inventory import (
    InventoryChange,
    REASON_FALLBACKS,
    adjust_quantities_with_reason_fallback,
    get_zeroing_changes,
    with_reason_fallback,
    zeroing_changes_for_item,
)

__all__ = [
    "GraphQLExecutor",
    "ShopifyClient",
    "ShopifyClientError",
    "ShopifyProtocolError",
    "PAGE_SIZE",
    "PageResult",
    "fetch_all",
    "iter_nodes",
    "iter_pages",
    "DispatchSummary",
    "chunked",
    "dispatch_chunks",
    "InventoryChange",
    "REASON_FALLBACKS",
    "adjust_quantities_with_reason_fallback",
    "get_zeroing_changes",
    "with_reason_fallback",
    "zeroing_changes_for_item",
]
