"""
Batch mutation dispatch for Shopify bulk edits.
"""

import logging
from dataclasses import dataclass
from typing import (
    Any, Awaitable, Callable, Collection, Dict, List, Optional, Protocol, Sequence, TypeVar
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

UserErrors = List[Dict[str, Any]]


class ErrorRecorder(Protocol):
    """Receives user errors that count as failures."""

    def record_error(self, scope: str, message: str, code: Optional[str] = None) -> None:
        ...


@dataclass
class DispatchSummary:
    """Counts for one dispatch run."""

    calls: int = 0
    items_submitted: int = 0
    items_clean: int = 0  # items in chunks that came back without failures
    failures: int = 0
    ignored: int = 0


def chunked(items: Sequence[T], chunk_size: int) -> List[List[T]]:
    """
    Split items into contiguous chunks of at most chunk_size.

    A non-positive chunk_size yields a single chunk with everything.
    No items yields no chunks.
    """
    items = list(items)
    if not items:
        return []
    if chunk_size <= 0:
        return [items]
    return [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]


async def dispatch_chunks(
    items: Sequence[T],
    chunk_size: int,
    mutate: Callable[[List[T]], Awaitable[UserErrors]],
    recorder: ErrorRecorder,
    scope: str,
    ignored_codes: Collection[str] = (),
) -> DispatchSummary:
    """
    Run one mutation per chunk, strictly in sequence.

    Args:
        items: Everything to submit
        chunk_size: Max items per call (Shopify's per-call limit)
        mutate: Sends one chunk, returns the payload's userErrors
        recorder: Collects failing user errors (usually an OperationResult)
        scope: Label stored with each recorded error
        ignored_codes: Error codes that are expected and only counted

    Remote errors raised by `mutate` propagate; chunks are never retried.
    """
    summary = DispatchSummary()
    chunks = chunked(items, chunk_size)
    total = len(chunks)

    for chunk in chunks:
        user_errors = await mutate(chunk)
        summary.calls += 1
        summary.items_submitted += len(chunk)

        chunk_failures = 0
        for error in user_errors or []:
            code = error.get("code") or None
            if code in ignored_codes:
                summary.ignored += 1
                continue
            chunk_failures += 1
            recorder.record_error(scope, error.get("message", str(error)), code)

        if chunk_failures:
            summary.failures += chunk_failures
            logger.warning(f"{scope}: {chunk_failures} user errors in chunk {summary.calls}/{total}")
        else:
            summary.items_clean += len(chunk)

        # Progress reporting
        if summary.calls % 100 == 0 or summary.calls == total:
            logger.info(f"{scope} progress: {summary.calls}/{total} calls")

    return summary
