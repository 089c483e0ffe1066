"""
Inventory quantity helpers: reading levels and adjusting them to zero.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Set

from inventory_ops.shopify.batch_update import chunked
from inventory_ops.shopify.client import GraphQLExecutor
from inventory_ops.shopify.mutations import INVENTORY_ADJUST_QUANTITIES
from inventory_ops.shopify.queries import INVENTORY_LEVELS_QUERY

logger = logging.getLogger(__name__)

# Tried in order; shops may restrict the accepted adjustment reasons
REASON_FALLBACKS = ("correction", "cycle_count", "other")
INVALID_REASON = "INVALID_REASON"

# Max ids per nodes(ids:) lookup
LEVELS_LOOKUP_SIZE = 50


@dataclass(frozen=True)
class InventoryChange:
    """One location-scoped quantity adjustment."""

    inventory_item_id: str
    location_id: str
    delta: int

    def to_input(self) -> Dict[str, Any]:
        """InventoryChangeInput shape."""
        return {
            "inventoryItemId": self.inventory_item_id,
            "locationId": self.location_id,
            "delta": self.delta,
        }


def has_error_code(user_errors: Iterable[Dict[str, Any]], code: str) -> bool:
    return any(e.get("code") == code for e in user_errors or [])


async def with_reason_fallback(
    attempt: Callable[[str], Awaitable[Dict[str, Any]]],
    get_user_errors: Callable[[Dict[str, Any]], List[Dict[str, Any]]],
    reasons: Sequence[str] = REASON_FALLBACKS,
) -> Dict[str, Any]:
    """
    Call `attempt` with each reason until one is not rejected as INVALID_REASON.

    Any other user error stops the probe. If every reason is rejected
    the last response is returned.
    """
    if not reasons:
        raise ValueError("At least one reason is required")

    response: Optional[Dict[str, Any]] = None
    for reason in reasons:
        response = await attempt(reason)
        if not has_error_code(get_user_errors(response), INVALID_REASON):
            return response
        logger.info(f"Adjustment reason '{reason}' rejected by shop, trying next")

    return response


async def adjust_quantities_with_reason_fallback(
    client: GraphQLExecutor,
    changes: List[InventoryChange],
    name: str = "available",
    reasons: Sequence[str] = REASON_FALLBACKS,
) -> Dict[str, Any]:
    """
    Run inventoryAdjustQuantities, probing adjustment reasons.

    Returns:
        The inventoryAdjustQuantities payload of the accepted (or last) attempt
    """
    change_inputs = [c.to_input() for c in changes]

    async def attempt(reason: str) -> Dict[str, Any]:
        data = await client.execute(
            INVENTORY_ADJUST_QUANTITIES,
            variables={
                "input": {
                    "name": name,
                    "reason": reason,
                    "changes": change_inputs,
                }
            },
        )
        return data.get("inventoryAdjustQuantities") or {}

    return await with_reason_fallback(
        attempt,
        lambda payload: payload.get("userErrors") or [],
        reasons,
    )


def zeroing_changes_for_item(
    item: Dict[str, Any],
    allowed_location_ids: Set[str],
) -> List[InventoryChange]:
    """
    Changes that bring an inventory item's available quantity to zero.

    Levels outside the allowed locations, without an "available"
    quantity, or already at zero produce nothing.
    """
    changes: List[InventoryChange] = []
    levels = (item.get("inventoryLevels") or {}).get("nodes") or []

    for level in levels:
        location_id = (level.get("location") or {}).get("id")
        if location_id not in allowed_location_ids:
            continue

        available = next(
            (q for q in level.get("quantities") or [] if q.get("name") == "available"),
            None,
        )
        if available is None:
            continue

        quantity = int(available.get("quantity") or 0)
        if quantity == 0:
            continue

        changes.append(InventoryChange(
            inventory_item_id=item["id"],
            location_id=location_id,
            delta=-quantity,
        ))

    return changes


async def get_zeroing_changes(
    client: GraphQLExecutor,
    inventory_item_ids: List[str],
    allowed_location_ids: Set[str],
) -> List[InventoryChange]:
    """
    Read inventory levels for the given items and build zeroing changes.

    Args:
        client: GraphQL executor
        inventory_item_ids: Inventory item GIDs (already de-duplicated)
        allowed_location_ids: Locations that may be adjusted
    """
    changes: List[InventoryChange] = []

    for chunk in chunked(inventory_item_ids, LEVELS_LOOKUP_SIZE):
        data = await client.execute(INVENTORY_LEVELS_QUERY, variables={"ids": chunk})

        for node in data.get("nodes") or []:
            if not node or node.get("__typename") != "InventoryItem":
                continue
            changes.extend(zeroing_changes_for_item(node, allowed_location_ids))

    return changes
