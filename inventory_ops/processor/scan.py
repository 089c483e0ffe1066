"""
Read-only scan for variants that keep selling when out of stock.
"""

import logging
from typing import Set

from ..shopify import GraphQLExecutor, iter_nodes
from ..shopify.queries import SCAN_VARIANTS_QUERY
from .results import PolicyOffender, PolicyScanResult

logger = logging.getLogger(__name__)


async def scan_inventory_policies(client: GraphQLExecutor) -> PolicyScanResult:
    """Count products and variants whose inventoryPolicy is CONTINUE."""
    result = PolicyScanResult()
    product_ids: Set[str] = set()
    product_ids_with_continue: Set[str] = set()

    async for variant in iter_nodes(client, SCAN_VARIANTS_QUERY, "productVariants"):
        result.variants_scanned += 1
        product = variant.get("product") or {}
        product_ids.add(product.get("id"))

        if variant.get("inventoryPolicy") == "CONTINUE":
            product_ids_with_continue.add(product.get("id"))
            result.record_offender(PolicyOffender(
                product_title=product.get("title", ""),
                product_handle=product.get("handle", ""),
                variant_title=variant.get("title", ""),
                sku=variant.get("sku"),
            ))

    result.products_scanned = len(product_ids)
    result.products_with_continue = len(product_ids_with_continue)

    logger.info(
        f"Policy scan finished: {result.variants_with_continue}/{result.variants_scanned} "
        f"variants on CONTINUE across {result.products_with_continue} products"
    )
    return result
