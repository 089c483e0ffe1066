"""
Tests for the bulk operations and their API routes.
"""

import pytest

from inventory_ops.config import settings
from inventory_ops.processor import (
    archive_products_by_vendor,
    get_operation,
    invalid_intent_result,
    run_deny_policy_sweep,
    run_inventory_reset,
    run_operation,
    run_zero_inventory,
    scan_inventory_policies,
)
from inventory_ops.routes import operations as operations_routes
from inventory_ops.shopify import ShopifyProtocolError

from fakes import FakeShopifyClient, connection, user_error

LOC_A = "gid://shopify/Location/1"
LOC_B = "gid://shopify/Location/2"


def variant(variant_id, product_id, policy, item_id=None, tracked=True):
    return {
        "id": variant_id,
        "inventoryPolicy": policy,
        "product": {"id": product_id},
        "inventoryItem": {"id": item_id, "tracked": tracked} if item_id else None,
    }


def levels_handler(levels_by_item):
    def handler(variables):
        return {"nodes": [
            {
                "__typename": "InventoryItem",
                "id": item_id,
                "inventoryLevels": {"nodes": [
                    {"location": {"id": loc}, "quantities": [{"name": "available", "quantity": qty}]}
                    for loc, qty in levels_by_item.get(item_id, [])
                ]},
            }
            for item_id in variables["ids"]
        ]}
    return handler


def ok_adjust(variables):
    return {"inventoryAdjustQuantities": {"inventoryAdjustmentGroup": {"id": "G"}, "userErrors": []}}


def ok_bulk_update(variables):
    return {"productVariantsBulkUpdate": {
        "productVariants": [{"id": v["id"], "inventoryPolicy": "DENY"} for v in variables["variants"]],
        "userErrors": [],
    }}


def store_client(**overrides):
    handlers = {
        "InventoryResetLocations": [connection("locations", [{"id": LOC_A, "name": "Main"}])],
        "InventoryResetVariants": [
            connection("productVariants", [
                variant("V1", "P1", "CONTINUE", "I1"),
                variant("V2", "P1", "DENY", "I2"),
                variant("V3", "P2", "CONTINUE", "I3", tracked=False),
            ], has_next=True, cursor="c1"),
            connection("productVariants", [
                variant("V4", "P1", "CONTINUE", "I4"),
                variant("V5", "P3", "DENY"),
            ]),
        ],
        "InventoryResetInventoryLevels": levels_handler({
            "I1": [(LOC_A, 7), (LOC_B, 3)],
            "I2": [(LOC_A, 0)],
            "I4": [(LOC_A, 2)],
        }),
        "InventoryResetAdjustQuantities": ok_adjust,
        "InventoryResetDenyPolicy": ok_bulk_update,
    }
    handlers.update(overrides)
    return FakeShopifyClient(handlers)


class TestInventoryReset:

    async def test_full_reset(self):
        client = store_client()

        result = await run_inventory_reset(client)

        assert result.ok is True
        assert result.locations == 1
        assert result.variants_scanned == 5
        assert result.inventory_adjust_calls == 2
        assert result.policy_update_calls == 3
        assert result.policy_updated_variants == 3
        assert result.sample_errors == []

        adjust_calls = client.calls_to("InventoryResetAdjustQuantities")
        assert [c["input"]["changes"] for c in adjust_calls] == [
            [{"inventoryItemId": "I1", "locationId": LOC_A, "delta": -7}],
            [{"inventoryItemId": "I4", "locationId": LOC_A, "delta": -2}],
        ]

        deny_calls = client.calls_to("InventoryResetDenyPolicy")
        assert [(c["productId"], c["variants"]) for c in deny_calls] == [
            ("P1", [{"id": "V1", "inventoryPolicy": "DENY"}]),
            ("P2", [{"id": "V3", "inventoryPolicy": "DENY"}]),
            ("P1", [{"id": "V4", "inventoryPolicy": "DENY"}]),
        ]

    async def test_untracked_items_are_not_read(self):
        client = store_client()

        await run_zero_inventory(client)

        looked_up = [i for c in client.calls_to("InventoryResetInventoryLevels") for i in c["ids"]]
        assert looked_up == ["I1", "I2", "I4"]
        assert client.calls_to("InventoryResetDenyPolicy") == []

    async def test_duplicate_inventory_items_are_read_once(self):
        client = store_client(InventoryResetVariants=[connection("productVariants", [
            variant("V1", "P1", "DENY", "I1"),
            variant("V2", "P1", "DENY", "I1"),
        ])])

        await run_zero_inventory(client)

        assert client.calls_to("InventoryResetInventoryLevels")[0]["ids"] == ["I1"]

    async def test_not_stocked_errors_are_ignored(self):
        client = store_client(InventoryResetAdjustQuantities=lambda v: {"inventoryAdjustQuantities": {
            "userErrors": [user_error("not stocked", "ITEM_NOT_STOCKED_AT_LOCATION")],
        }})

        result = await run_zero_inventory(client)

        assert result.ok is True
        assert result.inventory_adjust_ignored_not_stocked_errors == 2
        assert result.inventory_adjust_user_errors == 0

    async def test_policy_errors_are_recorded_and_run_continues(self):
        def bulk_update(variables):
            if variables["productId"] == "P2":
                return {"productVariantsBulkUpdate": {"userErrors": [user_error("locked", "PRODUCT_LOCKED")]}}
            return ok_bulk_update(variables)

        client = store_client(InventoryResetDenyPolicy=bulk_update)

        result = await run_deny_policy_sweep(client)

        assert result.ok is False
        assert result.policy_update_calls == 3
        assert result.policy_update_user_errors == 1
        assert result.sample_errors[0].scope == "productVariantsBulkUpdate"
        assert result.sample_errors[0].code == "PRODUCT_LOCKED"

    async def test_deny_sweep_is_idempotent(self):
        client = store_client(InventoryResetVariants=[connection("productVariants", [
            variant("V1", "P1", "DENY", "I1"),
            variant("V2", "P2", "DENY", "I2"),
        ])])

        result = await run_deny_policy_sweep(client)

        assert result.ok is True
        assert client.calls_to("InventoryResetDenyPolicy") == []
        assert client.calls_to("InventoryResetLocations") == []
        assert client.calls_to("InventoryResetAdjustQuantities") == []

    async def test_large_product_is_split_into_chunks_of_250(self):
        variants = [variant(f"V{i}", "P1", "CONTINUE") for i in range(530)]
        client = store_client(InventoryResetVariants=[connection("productVariants", variants)])

        result = await run_deny_policy_sweep(client)

        assert [len(c["variants"]) for c in client.calls_to("InventoryResetDenyPolicy")] == [250, 250, 30]
        assert result.policy_updated_variants == 530

    async def test_remote_error_aborts_run(self):
        def fail(variables):
            raise ShopifyProtocolError("Shopify GraphQL request failed")

        client = store_client(InventoryResetDenyPolicy=fail)

        with pytest.raises(ShopifyProtocolError):
            await run_inventory_reset(client)


class TestArchiveByVendor:

    async def test_archives_active_products_only(self):
        def archive(variables):
            if variables["id"] == "P3":
                return {"productUpdate": {"product": None, "userErrors": [
                    user_error("Product is locked"), user_error("Try again"),
                ]}}
            return {"productUpdate": {"product": {"id": variables["id"], "status": "ARCHIVED"}, "userErrors": []}}

        client = FakeShopifyClient({
            "ProductsByVendor": [
                connection("products", [{"id": "P1", "status": "ACTIVE"}, {"id": "P2", "status": "ARCHIVED"}],
                           has_next=True, cursor="c1"),
                connection("products", [{"id": "P3", "status": "DRAFT"}]),
            ],
            "ArchiveProduct": archive,
        })

        result = await archive_products_by_vendor(client, "Acme")

        assert result.ok is False
        assert result.vendor == "Acme"
        assert result.scanned == 3
        assert result.archived == 1
        assert result.already_archived == 1
        assert result.user_errors == 2
        assert [e.scope for e in result.sample_errors] == ["productUpdate", "productUpdate"]
        assert [c["id"] for c in client.calls_to("ArchiveProduct")] == ["P1", "P3"]
        assert all(c["query"] == "vendor:Acme" for c in client.calls_to("ProductsByVendor"))

    async def test_vendor_with_spaces_is_quoted(self):
        client = FakeShopifyClient({"ProductsByVendor": [connection("products", [])]})

        result = await archive_products_by_vendor(client, "Blue Sky")

        assert result.ok is True
        assert client.calls_to("ProductsByVendor")[0]["query"] == 'vendor:"Blue Sky"'

    async def test_vendor_is_required(self):
        with pytest.raises(ValueError):
            await archive_products_by_vendor(FakeShopifyClient({}), "")


class TestPolicyScan:

    async def test_counts_continue_variants(self):
        def scan_variant(vid, pid, policy, sku=None):
            return {
                "id": vid, "title": f"Title {vid}", "sku": sku, "inventoryPolicy": policy,
                "product": {"id": pid, "title": f"Product {pid}", "handle": f"product-{pid}"},
            }

        client = FakeShopifyClient({"InventoryPolicyScanVariants": [
            connection("productVariants", [
                scan_variant("V1", "P1", "CONTINUE", sku="SKU-1"),
                scan_variant("V2", "P1", "CONTINUE"),
            ], has_next=True, cursor="c1"),
            connection("productVariants", [
                scan_variant("V3", "P2", "DENY"),
            ]),
        ]})

        result = await scan_inventory_policies(client)

        assert result.ok is False
        assert result.variants_scanned == 3
        assert result.products_scanned == 2
        assert result.variants_with_continue == 2
        assert result.products_with_continue == 1
        assert result.sample_offenders[0].sku == "SKU-1"
        assert result.sample_offenders[0].product_handle == "product-P1"
        assert not client.calls_to("InventoryResetDenyPolicy")

    async def test_clean_store_is_ok(self):
        client = FakeShopifyClient({"InventoryPolicyScanVariants": [connection("productVariants", [])]})

        result = await scan_inventory_policies(client)

        assert result.ok is True
        assert result.variants_scanned == 0


class TestRunner:

    async def test_run_by_name(self):
        client = store_client()
        result = await run_operation("deny-policy", client)
        assert result.policy_update_calls == 3

    async def test_unknown_operation(self):
        with pytest.raises(KeyError):
            get_operation("delete-everything")

    async def test_archive_requires_vendor(self):
        with pytest.raises(ValueError):
            await run_operation("archive-vendor", FakeShopifyClient({}))

    def test_invalid_intent_result_is_zeroed(self):
        result = invalid_intent_result(get_operation("inventory-reset")).to_dict()
        assert result["ok"] is False
        assert result["variants_scanned"] == 0
        assert result["sample_errors"] == [{"scope": "request", "message": "Invalid intent", "code": None}]


@pytest.fixture
def admin_token(monkeypatch):
    monkeypatch.setattr(settings, "admin_api_token", "admin-secret")
    return {"X-Admin-Token": "admin-secret"}


@pytest.fixture
def fake_shop(monkeypatch):
    client = store_client()
    monkeypatch.setattr(operations_routes, "create_shopify_client", lambda: client)
    return client


class TestOperationRoutes:

    async def test_disabled_without_token(self, http_client, monkeypatch):
        monkeypatch.setattr(settings, "admin_api_token", "")
        response = await http_client.post("/api/operations/inventory-reset", json={"intent": "run"})
        assert response.status_code == 503

    async def test_wrong_token(self, http_client, admin_token):
        response = await http_client.post(
            "/api/operations/inventory-reset", json={"intent": "run"}, headers={"X-Admin-Token": "nope"}
        )
        assert response.status_code == 401

    async def test_invalid_intent(self, http_client, admin_token, fake_shop):
        response = await http_client.post(
            "/api/operations/inventory-reset", json={"intent": "go"}, headers=admin_token
        )

        assert response.status_code == 400
        body = response.json()
        assert body["ok"] is False
        assert body["sample_errors"][0]["message"] == "Invalid intent"
        assert fake_shop.calls == []

    async def test_missing_body_is_invalid_intent(self, http_client, admin_token, fake_shop):
        response = await http_client.post("/api/operations/policy-scan", headers=admin_token)

        assert response.status_code == 400
        body = response.json()
        assert body["ok"] is False
        assert body["sample_errors"][0]["message"] == "Invalid intent"
        assert fake_shop.calls == []

    async def test_unconfigured_shop_is_500(self, http_client, admin_token, monkeypatch):
        monkeypatch.setattr(settings, "shop_domain", "")
        response = await http_client.post(
            "/api/operations/policy-scan", json={"intent": "scan"}, headers=admin_token
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "SHOP_DOMAIN and SHOPIFY_ACCESS_TOKEN must be set"

    async def test_runs_operation(self, http_client, admin_token, fake_shop):
        response = await http_client.post(
            "/api/operations/inventory-reset", json={"intent": "run"}, headers=admin_token
        )

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["variants_scanned"] == 5
        assert body["policy_updated_variants"] == 3

    async def test_unknown_operation(self, http_client, admin_token):
        response = await http_client.post("/api/operations/nope", json={"intent": "run"}, headers=admin_token)
        assert response.status_code == 404

    async def test_archive_needs_vendor(self, http_client, admin_token, fake_shop, monkeypatch):
        monkeypatch.setattr(settings, "archive_vendor", "")
        response = await http_client.post(
            "/api/operations/archive-vendor", json={"intent": "archive"}, headers=admin_token
        )
        assert response.status_code == 422

    async def test_remote_error_is_502(self, http_client, admin_token, monkeypatch):
        def fail(variables):
            raise ShopifyProtocolError("Shopify GraphQL request failed: [\"boom\"]")

        client = store_client(InventoryPolicyScanVariants=fail)
        monkeypatch.setattr(operations_routes, "create_shopify_client", lambda: client)

        response = await http_client.post(
            "/api/operations/policy-scan", json={"intent": "scan"}, headers=admin_token
        )

        assert response.status_code == 502
        assert "boom" in response.json()["detail"]

    async def test_lists_operations(self, http_client, admin_token):
        response = await http_client.get("/api/operations", headers=admin_token)
        assert response.json()["archive-vendor"] == {"intent": "archive", "needs_vendor": True}
