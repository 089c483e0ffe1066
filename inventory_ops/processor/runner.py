"""
Runner for executing a named bulk operation.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Type

from ..shopify import GraphQLExecutor
from .archive import archive_products_by_vendor
from .reset import run_deny_policy_sweep, run_inventory_reset, run_zero_inventory
from .results import ArchiveResult, InventoryResetResult, OperationResult, PolicyScanResult
from .scan import scan_inventory_policies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Operation:
    """A runnable operation and the intent a request must carry."""
    name: str
    intent: str
    result_type: Type[OperationResult]
    run: Callable[..., Awaitable[OperationResult]]
    needs_vendor: bool = False


OPERATIONS: Dict[str, Operation] = {
    op.name: op
    for op in (
        Operation("inventory-reset", "run", InventoryResetResult, run_inventory_reset),
        Operation("zero-inventory", "run", InventoryResetResult, run_zero_inventory),
        Operation("deny-policy", "run", InventoryResetResult, run_deny_policy_sweep),
        Operation("archive-vendor", "archive", ArchiveResult, archive_products_by_vendor,
                  needs_vendor=True),
        Operation("policy-scan", "scan", PolicyScanResult, scan_inventory_policies),
    )
}


def get_operation(name: str) -> Operation:
    """Look up an operation by name."""
    operation = OPERATIONS.get(name)
    if operation is None:
        raise KeyError(f"Unknown operation: {name}")
    return operation


def invalid_intent_result(operation: Operation) -> OperationResult:
    """Zeroed result explaining why nothing ran."""
    result = operation.result_type()
    result.record_error("request", "Invalid intent")
    return result


async def run_operation(
    name: str,
    client: GraphQLExecutor,
    vendor: Optional[str] = None,
) -> OperationResult:
    """
    Run one operation to completion.

    Shopify client errors propagate; user errors end up in the result.
    """
    operation = get_operation(name)
    logger.info(f"Starting operation '{name}'")

    if operation.needs_vendor:
        if not vendor:
            raise ValueError(f"Operation '{name}' requires a vendor")
        result = await operation.run(client, vendor)
    else:
        result = await operation.run(client)

    logger.info(f"Operation '{name}' finished, ok={result.ok}")
    return result
