"""
Result summaries returned by bulk operations.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


MAX_SAMPLE_ERRORS = 25
MAX_SAMPLE_OFFENDERS = 25


@dataclass
class SampleError:
    """One recorded user error."""

    scope: str
    message: str
    code: Optional[str] = None


@dataclass
class OperationResult:
    """
    Accumulator shared by every stage of one operation run.

    `ok` flips to False on the first recorded error; samples are capped
    at MAX_SAMPLE_ERRORS, first come first kept.
    """

    ok: bool = True
    sample_errors: List[SampleError] = field(default_factory=list)

    def record_error(self, scope: str, message: str, code: Optional[str] = None) -> None:
        self.ok = False
        if len(self.sample_errors) < MAX_SAMPLE_ERRORS:
            self.sample_errors.append(SampleError(scope=scope, message=message, code=code))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InventoryResetResult(OperationResult):
    """Zero-inventory and deny-policy counts."""

    locations: int = 0
    variants_scanned: int = 0
    inventory_adjust_calls: int = 0
    inventory_adjust_user_errors: int = 0
    inventory_adjust_ignored_not_stocked_errors: int = 0
    policy_update_calls: int = 0
    policy_updated_variants: int = 0
    policy_update_user_errors: int = 0


@dataclass
class ArchiveResult(OperationResult):
    """Archive-by-vendor counts."""

    vendor: str = ""
    scanned: int = 0
    archived: int = 0
    already_archived: int = 0
    user_errors: int = 0


@dataclass
class PolicyOffender:
    """A variant that keeps selling when out of stock."""

    product_title: str
    product_handle: str
    variant_title: str
    sku: Optional[str] = None


@dataclass
class PolicyScanResult(OperationResult):
    """Read-only scan for CONTINUE inventory policies."""

    products_scanned: int = 0
    variants_scanned: int = 0
    products_with_continue: int = 0
    variants_with_continue: int = 0
    sample_offenders: List[PolicyOffender] = field(default_factory=list)

    def record_offender(self, offender: PolicyOffender) -> None:
        self.ok = False
        self.variants_with_continue += 1
        if len(self.sample_offenders) < MAX_SAMPLE_OFFENDERS:
            self.sample_offenders.append(offender)
