"""
GraphQL query strings for Shopify Admin API.

Connection queries take `$first` and `$after` so they can be driven by
the paginator.
"""


LOCATIONS_QUERY = '''
query InventoryResetLocations($first: Int!, $after: String) {
  locations(first: $first, after: $after) {
    nodes { id name }
    pageInfo { hasNextPage endCursor }
  }
}
'''

# Variants with what the reset needs: policy, parent product, inventory item
RESET_VARIANTS_QUERY = '''
query InventoryResetVariants($first: Int!, $after: String) {
  productVariants(first: $first, after: $after) {
    nodes {
      id
      inventoryPolicy
      product { id }
      inventoryItem { id tracked }
    }
    pageInfo { hasNextPage endCursor }
  }
}
'''

INVENTORY_LEVELS_QUERY = '''
query InventoryResetInventoryLevels($ids: [ID!]!) {
  nodes(ids: $ids) {
    __typename
    ... on InventoryItem {
      id
      inventoryLevels(first: 250) {
        nodes {
          location { id }
          quantities(names: ["available"]) { name quantity }
        }
      }
    }
  }
}
'''

SCAN_VARIANTS_QUERY = '''
query InventoryPolicyScanVariants($first: Int!, $after: String) {
  productVariants(first: $first, after: $after) {
    nodes {
      id
      title
      sku
      inventoryPolicy
      product { id title handle }
    }
    pageInfo { hasNextPage endCursor }
  }
}
'''

PRODUCTS_BY_VENDOR_QUERY = '''
query ProductsByVendor($first: Int!, $after: String, $query: String!) {
  products(first: $first, after: $after, query: $query) {
    nodes { id status }
    pageInfo { hasNextPage endCursor }
  }
}
'''


def build_vendor_search(vendor: str) -> str:
    """Product search string matching one vendor."""
    if any(c.isspace() for c in vendor):
        escaped = vendor.replace('"', '\\"')
        return f'vendor:"{escaped}"'
    return f"vendor:{vendor}"
