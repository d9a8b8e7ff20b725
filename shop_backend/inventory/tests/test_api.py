import uuid

from django.test import TestCase
from rest_framework.test import APIClient

from inventory.models import StockMovement, StockSnapshot
from shops.models import ShopMembership
from shops.tests.factories import add_member, make_item, make_shop, make_user

BASE = "/api/inventory/"


class InventoryApiTestBase(TestCase):
    def setUp(self):
        self.shop = make_shop()
        self.manager = make_user("manager@example.com")
        self.staff = make_user("staff@example.com")
        add_member(self.manager, self.shop, ShopMembership.Role.MANAGER)
        add_member(self.staff, self.shop, ShopMembership.Role.STAFF)

        self.item = make_item(self.shop, self.manager, sku="API-1", quantity=10, reorder_level=5)

    def client_for(self, user, shop=None):
        client = APIClient()
        client.force_authenticate(user=user)
        client.credentials(HTTP_X_SHOP_ID=str((shop or self.shop).id))
        return client


class InventoryItemEndpointTests(InventoryApiTestBase):
    """
    GUARANTEES:
    - camelCase wire format
    - Staff can read, only OWNER / MANAGER can write
    """

    def test_list_items(self):
        res = self.client_for(self.staff).get(BASE)
        self.assertEqual(res.status_code, 200)

        (row,) = res.json()["items"]
        self.assertEqual(row["sku"], "API-1")
        self.assertEqual(row["quantity"], 10)
        self.assertEqual(row["reorderLevel"], 5)
        self.assertEqual(row["sellingPrice"], "20.00")
        self.assertIn("lastUpdated", row)

    def test_list_search(self):
        client = self.client_for(self.staff)
        self.assertEqual(len(client.get(BASE, {"search": "api-"}).json()["items"]), 1)
        self.assertEqual(len(client.get(BASE, {"search": "nothing"}).json()["items"]), 0)

    def test_manager_creates_item(self):
        res = self.client_for(self.manager).post(
            BASE,
            {
                "name": "Green Tea",
                "sku": "TEA-1",
                "quantity": 4,
                "costPrice": "2.50",
                "sellingPrice": 6,
                "reorderLevel": 1,
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        item = res.json()["item"]
        self.assertEqual(item["quantity"], 4)
        self.assertEqual(item["costPrice"], "2.50")

    def test_create_duplicate_sku_is_400(self):
        res = self.client_for(self.manager).post(
            BASE,
            {
                "name": "Copy",
                "sku": "API-1",
                "quantity": 0,
                "costPrice": 1,
                "sellingPrice": 2,
                "reorderLevel": 0,
            },
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertIn("SKU", res.json()["detail"])

    def test_create_with_negative_price_is_400(self):
        res = self.client_for(self.manager).post(
            BASE,
            {
                "name": "Bad",
                "sku": "BAD-1",
                "quantity": 0,
                "costPrice": -1,
                "sellingPrice": 2,
                "reorderLevel": 0,
            },
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_staff_cannot_create_item(self):
        res = self.client_for(self.staff).post(
            BASE, {"name": "Nope", "sku": "NOPE"}, format="json"
        )
        self.assertEqual(res.status_code, 403)

    def test_detail_update_delete(self):
        client = self.client_for(self.manager)
        url = f"{BASE}{self.item['id']}/"

        self.assertEqual(client.get(url).json()["item"]["sku"], "API-1")

        res = client.patch(url, {"name": "Renamed", "quantity": 0}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["item"]["name"], "Renamed")
        self.assertEqual(res.json()["item"]["quantity"], 10)

        res = client.delete(url)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"id": str(self.item["id"]), "deleted": True})

        self.assertEqual(client.get(url).status_code, 404)

    def test_unknown_item_is_404(self):
        res = self.client_for(self.staff).get(f"{BASE}{uuid.uuid4()}/")
        self.assertEqual(res.status_code, 404)

    def test_bulk_import(self):
        res = self.client_for(self.manager).post(
            f"{BASE}bulk-import/",
            {
                "items": [
                    {"name": "One", "sku": "BULK-1", "quantity": 1, "costPrice": 1,
                     "sellingPrice": 2, "reorderLevel": 0},
                    {"name": "Two", "sku": "BULK-2", "quantity": 0, "costPrice": 1,
                     "sellingPrice": 2, "reorderLevel": 0},
                ]
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.json()["created"], 2)

    def test_bulk_import_empty_is_400(self):
        res = self.client_for(self.manager).post(
            f"{BASE}bulk-import/", {"items": []}, format="json"
        )
        self.assertEqual(res.status_code, 400)


class StockEndpointTests(InventoryApiTestBase):
    """
    GUARANTEES:
    - Both adjust payload shapes map onto the ledger
    - Ledger errors map to HTTP statuses with a {"detail"} body
    """

    def test_adjust_primary_payload(self):
        res = self.client_for(self.manager).post(
            f"{BASE}adjust/",
            {"productId": str(self.item["id"]), "quantity": 3, "type": "OUT", "source": "DAMAGE"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(
            res.json(),
            {"productId": str(self.item["id"]), "previousQty": 10, "currentQty": 7},
        )

    def test_adjust_delta_payload_maps_reason_to_source(self):
        res = self.client_for(self.manager).post(
            f"{BASE}adjust/",
            {"itemId": str(self.item["id"]), "delta": -2, "reason": "Expired batch", "notes": ""},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["currentQty"], 8)

        latest = StockMovement.objects.filter(product_id=self.item["id"]).order_by("-created_at")[0]
        self.assertEqual(latest.movement_type, StockMovement.MovementType.OUT)
        self.assertEqual(latest.source, StockMovement.Source.EXPIRED)

    def test_adjust_zero_delta_is_400(self):
        res = self.client_for(self.manager).post(
            f"{BASE}adjust/",
            {"itemId": str(self.item["id"]), "delta": 0, "reason": "count"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_adjust_out_of_range_quantity_is_400_and_writes_nothing(self):
        client = self.client_for(self.manager)
        for payload in (
            {"productId": str(self.item["id"]), "quantity": 10**19, "type": "IN", "source": "MANUAL"},
            {"productId": str(self.item["id"]), "quantity": 2147483647, "type": "IN", "source": "MANUAL"},
            {"itemId": str(self.item["id"]), "delta": 1e30, "reason": "count"},
        ):
            with self.subTest(payload=payload):
                res = client.post(f"{BASE}adjust/", payload, format="json")
                self.assertEqual(res.status_code, 400)

        self.assertEqual(
            StockSnapshot.objects.get(product_id=self.item["id"]).quantity_available, 10
        )
        self.assertEqual(StockMovement.objects.filter(product_id=self.item["id"]).count(), 1)

    def test_create_with_out_of_range_values_is_400(self):
        client = self.client_for(self.manager)
        base = {"name": "Huge", "sku": "HUGE-1", "quantity": 0, "costPrice": 1,
                "sellingPrice": 2, "reorderLevel": 0}
        for overrides in ({"quantity": 10**19}, {"sellingPrice": "1e30"}, {"costPrice": "1e12"}):
            with self.subTest(overrides=overrides):
                res = client.post(BASE, {**base, **overrides}, format="json")
                self.assertEqual(res.status_code, 400)

        self.assertEqual(client.get(BASE, {"search": "HUGE"}).json()["items"], [])

    def test_low_stock_threshold_out_of_range_is_400(self):
        res = self.client_for(self.staff).get(f"{BASE}low-stock/", {"threshold": 10**19})
        self.assertEqual(res.status_code, 400)

    def test_adjust_insufficient_stock_is_400_and_writes_nothing(self):
        res = self.client_for(self.manager).post(
            f"{BASE}adjust/",
            {"productId": str(self.item["id"]), "quantity": 11, "type": "OUT", "source": "MANUAL"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertIn("Insufficient stock", res.json()["detail"])
        self.assertEqual(
            StockSnapshot.objects.get(product_id=self.item["id"]).quantity_available, 10
        )

    def test_adjust_requires_adjust_capability(self):
        res = self.client_for(self.staff).post(
            f"{BASE}adjust/",
            {"productId": str(self.item["id"]), "quantity": 1, "type": "IN", "source": "MANUAL"},
            format="json",
        )
        self.assertEqual(res.status_code, 403)

    def test_adjust_product_of_another_shop_is_404(self):
        other = make_shop("Other")
        add_member(self.manager, other, ShopMembership.Role.MANAGER)

        res = self.client_for(self.manager, shop=other).post(
            f"{BASE}adjust/",
            {"productId": str(self.item["id"]), "quantity": 1, "type": "IN", "source": "MANUAL"},
            format="json",
        )
        self.assertEqual(res.status_code, 404)

    def test_history(self):
        client = self.client_for(self.staff)
        res = client.get(f"{BASE}{self.item['id']}/history/", {"limit": 5})
        self.assertEqual(res.status_code, 200)
        (entry,) = res.json()["history"]
        self.assertEqual(entry["reason"], "MANUAL")
        self.assertEqual(entry["delta"], 10)
        self.assertIn("createdAt", entry)

        self.assertEqual(client.get(f"{BASE}{self.item['id']}/history/", {"limit": 0}).status_code, 400)
        self.assertEqual(client.get(f"{BASE}{self.item['id']}/history/", {"limit": 101}).status_code, 400)

    def test_low_stock(self):
        make_item(self.shop, self.manager, sku="LOW-1", quantity=2)
        client = self.client_for(self.staff)

        res = client.get(f"{BASE}low-stock/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([r["sku"] for r in res.json()["items"]], ["LOW-1"])

        res = client.get(f"{BASE}low-stock/", {"threshold": 10})
        self.assertEqual([r["sku"] for r in res.json()["items"]], ["LOW-1", "API-1"])


class ShopScopeTests(InventoryApiTestBase):
    """
    GUARANTEES:
    - Tenant comes from X-Shop-Id and must match a membership
    """

    def test_unauthenticated_is_401(self):
        res = APIClient().get(BASE, HTTP_X_SHOP_ID=str(self.shop.id))
        self.assertEqual(res.status_code, 401)

    def test_missing_shop_header_is_400(self):
        client = APIClient()
        client.force_authenticate(user=self.staff)
        self.assertEqual(client.get(BASE).status_code, 400)

    def test_malformed_shop_header_is_400(self):
        client = APIClient()
        client.force_authenticate(user=self.staff)
        self.assertEqual(client.get(BASE, HTTP_X_SHOP_ID="not-a-uuid").status_code, 400)

    def test_shop_without_membership_is_403(self):
        stranger_shop = make_shop("Stranger")
        make_item(stranger_shop, self.manager, sku="SECRET")

        res = self.client_for(self.staff, shop=stranger_shop).get(BASE)
        self.assertEqual(res.status_code, 403)

    def test_inactive_shop_is_403(self):
        self.shop.is_active = False
        self.shop.save(update_fields=["is_active"])
        self.assertEqual(self.client_for(self.staff).get(BASE).status_code, 403)
