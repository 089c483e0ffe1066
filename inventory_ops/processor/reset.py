"""
Inventory reset: zero available stock everywhere and stop overselling.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Set

from ..shopify import (
    GraphQLExecutor,
    InventoryChange,
    adjust_quantities_with_reason_fallback,
    dispatch_chunks,
    fetch_all,
    get_zeroing_changes,
    iter_pages,
)
from ..shopify.mutations import PRODUCT_VARIANTS_BULK_UPDATE
from ..shopify.queries import LOCATIONS_QUERY, RESET_VARIANTS_QUERY
from .results import InventoryResetResult

logger = logging.getLogger(__name__)

# Shopify caps both mutations at 250 entries per call
ADJUST_CHUNK_SIZE = 250
POLICY_CHUNK_SIZE = 250

NOT_STOCKED_AT_LOCATION = "ITEM_NOT_STOCKED_AT_LOCATION"


async def fetch_location_ids(client: GraphQLExecutor) -> List[str]:
    """All location ids of the shop."""
    locations = await fetch_all(client, LOCATIONS_QUERY, "locations")
    return [loc["id"] for loc in locations]


def collect_tracked_item_ids(variants: List[Dict[str, Any]]) -> List[str]:
    """Unique inventory item ids of tracked variants, in first-seen order."""
    item_ids: Dict[str, None] = {}
    for variant in variants:
        item = variant.get("inventoryItem") or {}
        # Untracked items have no levels to adjust
        if item.get("id") and item.get("tracked"):
            item_ids.setdefault(item["id"], None)
    return list(item_ids)


def group_variants_needing_deny(variants: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """Variant ids not on DENY, keyed by product id, in encounter order."""
    by_product: Dict[str, List[str]] = defaultdict(list)
    for variant in variants:
        if variant.get("inventoryPolicy") != "DENY":
            by_product[variant["product"]["id"]].append(variant["id"])
    return dict(by_product)


async def zero_inventory_for_variants(
    client: GraphQLExecutor,
    variants: List[Dict[str, Any]],
    allowed_location_ids: Set[str],
    result: InventoryResetResult,
) -> None:
    """
    Adjust available quantities of the variants' items down to zero.

    Adjusting by a negative delta avoids the compare-and-set checks some
    shops enforce on inventorySetQuantities.
    """
    item_ids = collect_tracked_item_ids(variants)
    changes = await get_zeroing_changes(client, item_ids, allowed_location_ids)
    if not changes:
        return

    async def adjust(chunk: List[InventoryChange]) -> List[Dict[str, Any]]:
        payload = await adjust_quantities_with_reason_fallback(client, chunk)
        return payload.get("userErrors") or []

    summary = await dispatch_chunks(
        changes,
        ADJUST_CHUNK_SIZE,
        adjust,
        result,
        scope="inventoryAdjustQuantities",
        ignored_codes={NOT_STOCKED_AT_LOCATION},
    )

    result.inventory_adjust_calls += summary.calls
    result.inventory_adjust_user_errors += summary.failures
    result.inventory_adjust_ignored_not_stocked_errors += summary.ignored


async def deny_policy_for_variants(
    client: GraphQLExecutor,
    variants: List[Dict[str, Any]],
    result: InventoryResetResult,
) -> None:
    """Set inventoryPolicy DENY on every variant that is not already DENY."""
    for product_id, variant_ids in group_variants_needing_deny(variants).items():

        async def update(chunk: List[str], product_id: str = product_id) -> List[Dict[str, Any]]:
            data = await client.execute(
                PRODUCT_VARIANTS_BULK_UPDATE,
                variables={
                    "productId": product_id,
                    "variants": [
                        {"id": variant_id, "inventoryPolicy": "DENY"}
                        for variant_id in chunk
                    ],
                },
            )
            return (data.get("productVariantsBulkUpdate") or {}).get("userErrors") or []

        summary = await dispatch_chunks(
            variant_ids,
            POLICY_CHUNK_SIZE,
            update,
            result,
            scope="productVariantsBulkUpdate",
        )

        result.policy_update_calls += summary.calls
        result.policy_updated_variants += summary.items_submitted
        result.policy_update_user_errors += summary.failures


async def _run_variant_pass(
    client: GraphQLExecutor,
    zero: bool,
    deny: bool,
) -> InventoryResetResult:
    """
    Walk all variants page by page, applying the requested changes to
    each page before the next one is fetched.
    """
    result = InventoryResetResult()

    location_ids: Set[str] = set()
    if zero:
        location_ids = set(await fetch_location_ids(client))
        result.locations = len(location_ids)
        logger.info(f"Found {result.locations} locations")

    async for page in iter_pages(client, RESET_VARIANTS_QUERY, "productVariants"):
        result.variants_scanned += len(page.nodes)

        if zero:
            await zero_inventory_for_variants(client, page.nodes, location_ids, result)
        if deny:
            await deny_policy_for_variants(client, page.nodes, result)

    logger.info(
        f"Inventory pass finished: {result.variants_scanned} variants, "
        f"{result.inventory_adjust_calls} adjust calls, "
        f"{result.policy_updated_variants} variants switched to DENY, ok={result.ok}"
    )
    return result


async def run_inventory_reset(client: GraphQLExecutor) -> InventoryResetResult:
    """Zero inventory at every location and set every variant to DENY."""
    return await _run_variant_pass(client, zero=True, deny=True)


async def run_zero_inventory(client: GraphQLExecutor) -> InventoryResetResult:
    """Zero available inventory at every location."""
    return await _run_variant_pass(client, zero=True, deny=False)


async def run_deny_policy_sweep(client: GraphQLExecutor) -> InventoryResetResult:
    """Set every variant that still continues selling to DENY."""
    return await _run_variant_pass(client, zero=False, deny=True)
