"""
Archive every product of a vendor.
"""

import logging
from typing import Any, Dict, List

from ..shopify import GraphQLExecutor, dispatch_chunks, iter_pages
from ..shopify.mutations import PRODUCT_ARCHIVE
from ..shopify.queries import PRODUCTS_BY_VENDOR_QUERY, build_vendor_search
from .results import ArchiveResult

logger = logging.getLogger(__name__)


async def archive_products_by_vendor(
    client: GraphQLExecutor,
    vendor: str,
) -> ArchiveResult:
    """
    Set status ARCHIVED on all of a vendor's products.

    productUpdate takes one product per call. Products already archived
    are only counted.
    """
    if not vendor:
        raise ValueError("vendor is required")

    result = ArchiveResult(vendor=vendor)

    async def archive(chunk: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        data = await client.execute(PRODUCT_ARCHIVE, variables={"id": chunk[0]["id"]})
        return (data.get("productUpdate") or {}).get("userErrors") or []

    async for page in iter_pages(
        client,
        PRODUCTS_BY_VENDOR_QUERY,
        "products",
        variables={"query": build_vendor_search(vendor)},
    ):
        result.scanned += len(page.nodes)

        to_archive = []
        for product in page.nodes:
            if product.get("status") == "ARCHIVED":
                result.already_archived += 1
            else:
                to_archive.append(product)

        summary = await dispatch_chunks(to_archive, 1, archive, result, scope="productUpdate")
        result.archived += summary.items_clean
        result.user_errors += summary.failures

    logger.info(
        f"Archive of vendor '{vendor}' finished: {result.scanned} scanned, "
        f"{result.archived} archived, {result.already_archived} already archived, "
        f"{result.user_errors} user errors"
    )
    return result
