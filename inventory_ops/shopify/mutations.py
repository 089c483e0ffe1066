"""
GraphQL mutation strings for Shopify Admin API.
"""


# Adjust available quantities by delta; reason is an enum the shop may restrict
INVENTORY_ADJUST_QUANTITIES = '''
mutation InventoryResetAdjustQuantities($input: InventoryAdjustQuantitiesInput!) {
  inventoryAdjustQuantities(input: $input) {
    inventoryAdjustmentGroup { id }
    userErrors { field message code }
  }
}
'''

# Switch variants of one product to inventoryPolicy DENY
PRODUCT_VARIANTS_BULK_UPDATE = '''
mutation InventoryResetDenyPolicy($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
  productVariantsBulkUpdate(productId: $productId, variants: $variants) {
    productVariants { id inventoryPolicy }
    userErrors { field message code }
  }
}
'''

PRODUCT_ARCHIVE = '''
mutation ArchiveProduct($id: ID!) {
  productUpdate(input: { id: $id, status: ARCHIVED }) {
    product { id status }
    userErrors { field message }
  }
}
'''
