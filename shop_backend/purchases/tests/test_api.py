import uuid

from django.test import TestCase
from rest_framework.test import APIClient

from inventory.models import StockSnapshot
from purchases.models import Purchase
from shops.models import ShopMembership
from shops.tests.factories import add_member, make_item, make_shop, make_user

BASE = "/api/purchases/"


class PurchaseApiTests(TestCase):
    """
    GUARANTEES:
    - OWNER / MANAGER record and read purchases; STAFF cannot
    - Suppliers: any member reads, OWNER / MANAGER create
    - Out-of-range quantities, prices and totals are 400 and write nothing
    """

    def setUp(self):
        self.shop = make_shop()
        self.owner = make_user("owner@example.com")
        self.staff = make_user("staff@example.com")
        add_member(self.owner, self.shop, ShopMembership.Role.OWNER)
        add_member(self.staff, self.shop, ShopMembership.Role.STAFF)
        self.item = make_item(self.shop, self.owner, sku="PUR-1", quantity=2)

    def client_for(self, user):
        client = APIClient()
        client.force_authenticate(user=user)
        client.credentials(HTTP_X_SHOP_ID=str(self.shop.id))
        return client

    def test_owner_records_purchase(self):
        client = self.client_for(self.owner)
        supplier = client.post(f"{BASE}suppliers/", {"name": "Acme"}, format="json").json()

        res = client.post(
            BASE,
            {
                "supplierId": supplier["id"],
                "items": [{"productId": str(self.item["id"]), "quantity": 3, "costPrice": "4.10"}],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        body = res.json()
        self.assertEqual(body["totalCost"], "12.30")
        self.assertEqual(body["itemCount"], 1)
        self.assertEqual(
            StockSnapshot.objects.get(product_id=self.item["id"]).quantity_available, 5
        )

        detail = client.get(f"{BASE}{body['purchaseId']}/")
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.json()["supplierName"], "Acme")
        self.assertEqual(detail.json()["items"][0]["lineTotal"], "12.30")

        listing = client.get(BASE).json()
        self.assertEqual([p["id"] for p in listing], [body["purchaseId"]])

    def test_unknown_product_is_404_and_nothing_changes(self):
        res = self.client_for(self.owner).post(
            BASE,
            {
                "items": [
                    {"productId": str(self.item["id"]), "quantity": 3, "costPrice": 5},
                    {"productId": str(uuid.uuid4()), "quantity": 4, "costPrice": 2},
                ]
            },
            format="json",
        )
        self.assertEqual(res.status_code, 404)
        self.assertEqual(
            StockSnapshot.objects.get(product_id=self.item["id"]).quantity_available, 2
        )

    def test_empty_items_is_400(self):
        res = self.client_for(self.owner).post(BASE, {"items": []}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_unknown_purchase_is_404(self):
        res = self.client_for(self.owner).get(f"{BASE}{uuid.uuid4()}/")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["detail"], "Purchase order not found")

    def test_staff_permissions(self):
        client = self.client_for(self.staff)
        self.assertEqual(client.get(BASE).status_code, 403)
        self.assertEqual(
            client.post(
                BASE,
                {"items": [{"productId": str(self.item["id"]), "quantity": 1, "costPrice": 1}]},
                format="json",
            ).status_code,
            403,
        )
        self.assertEqual(client.get(f"{BASE}suppliers/").status_code, 200)
        self.assertEqual(
            client.post(f"{BASE}suppliers/", {"name": "Nope Ltd"}, format="json").status_code,
            403,
        )

    def test_out_of_range_lines_are_400_and_nothing_changes(self):
        client = self.client_for(self.owner)
        for line in (
            {"quantity": 10**19, "costPrice": 1},
            {"quantity": 1, "costPrice": "1e30"},
            {"quantity": 1, "costPrice": "10000000000"},
            {"quantity": 200, "costPrice": "9999999999.99"},
        ):
            with self.subTest(line=line):
                res = client.post(
                    BASE,
                    {"items": [{"productId": str(self.item["id"]), **line}]},
                    format="json",
                )
                self.assertEqual(res.status_code, 400)

        self.assertFalse(Purchase.objects.exists())
        self.assertEqual(
            StockSnapshot.objects.get(product_id=self.item["id"]).quantity_available, 2
        )
