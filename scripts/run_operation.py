#!/usr/bin/env python3
"""
Run a bulk operation against the configured shop from the command line.
Usage: python scripts/run_operation.py <operation> [--vendor NAME]

Operations: inventory-reset, zero-inventory, deny-policy, archive-vendor, policy-scan
Exit status is 1 if the operation reported errors or Shopify failed.
"""

import argparse
import asyncio
import json
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from inventory_ops.config import settings
from inventory_ops.dependencies import create_shopify_client
from inventory_ops.processor import OPERATIONS, run_operation
from inventory_ops.shopify import ShopifyClientError

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


async def main(operation: str, vendor: str) -> int:
    try:
        async with create_shopify_client() as client:
            result = await run_operation(operation, client, vendor=vendor)
    except ShopifyClientError as e:
        logger.error(f"Operation '{operation}' aborted: {e}")
        return 1

    print(json.dumps(result.to_dict(), indent=2))

    if not result.ok:
        for error in result.sample_errors:
            logger.error(f"  {error.scope}: {error.message}" + (f" ({error.code})" if error.code else ""))
        return 1
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a Shopify bulk operation")
    parser.add_argument("operation", choices=sorted(OPERATIONS))
    parser.add_argument("--vendor", default=settings.archive_vendor,
                        help="Vendor for archive-vendor (default: ARCHIVE_VENDOR)")
    args = parser.parse_args()

    if OPERATIONS[args.operation].needs_vendor and not args.vendor:
        parser.error("--vendor is required for archive-vendor")

    sys.exit(asyncio.run(main(args.operation, args.vendor)))
