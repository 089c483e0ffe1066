"""
Processor package for bulk inventory and product operations.
"""

from .results import (
    OperationResult,
    SampleError,
    InventoryResetResult,
    ArchiveResult,
    PolicyScanResult,
    PolicyOffender,
    MAX_SAMPLE_ERRORS,
)
from .reset import (
    run_inventory_reset,
    run_zero_inventory,
    run_deny_policy_sweep,
    fetch_location_ids,
)
from .archive import archive_products_by_vendor
from .scan import scan_inventory_policies
from .runner import OPERATIONS, Operation, get_operation, invalid_intent_result, run_operation

__all__ = [
    "OperationResult",
    "SampleError",
    "InventoryResetResult",
    "ArchiveResult",
    "PolicyScanResult",
    "PolicyOffender",
    "MAX_SAMPLE_ERRORS",
    "run_inventory_reset",
    "run_zero_inventory",
    "run_deny_policy_sweep",
    "fetch_location_ids",
    "archive_products_by_vendor",
    "scan_inventory_policies",
    "OPERATIONS",
    "Operation",
    "get_operation",
    "invalid_intent_result",
    "run_operation",
]
