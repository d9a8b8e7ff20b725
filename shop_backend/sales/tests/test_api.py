from django.test import TestCase
from rest_framework.test import APIClient

from inventory.models import StockSnapshot
from sales.models import Sale
from shops.models import ShopMembership
from shops.tests.factories import add_member, make_item, make_shop, make_user

BASE = "/api/sales/"


class SalesApiTests(TestCase):
    """
    GUARANTEES:
    - Any member records sales; OWNER / MANAGER read history and customers
    - Ledger errors map to {"detail"} responses
    - Out-of-range prices, quantities and totals are 400 and write nothing
    """

    def setUp(self):
        self.shop = make_shop()
        self.owner = make_user("owner@example.com")
        self.staff = make_user("staff@example.com")
        add_member(self.owner, self.shop, ShopMembership.Role.OWNER)
        add_member(self.staff, self.shop, ShopMembership.Role.STAFF)
        self.item = make_item(self.shop, self.owner, sku="SALE-1", quantity=10)

        self.client = self.client_for(self.staff)
        self.owner_client = self.client_for(self.owner)

    def client_for(self, user, shop=None):
        client = APIClient()
        client.force_authenticate(user=user)
        client.credentials(HTTP_X_SHOP_ID=str((shop or self.shop).id))
        return client

    def _sell(self, quantity, method="CASH", price=20, client=None, **extra):
        return (client or self.client).post(
            BASE,
            {
                "paymentMethod": method,
                "items": [
                    {"productId": str(self.item["id"]), "quantity": quantity, "sellingPrice": price}
                ],
                **extra,
            },
            format="json",
        )

    def _qty(self):
        return StockSnapshot.objects.get(product_id=self.item["id"]).quantity_available

    # =====================================================
    # RECORD / READ
    # =====================================================

    def test_staff_records_sale(self):
        res = self._sell(5)
        self.assertEqual(res.status_code, 201)
        body = res.json()
        self.assertEqual(body["totalAmount"], "100.00")
        self.assertEqual(body["itemCount"], 1)
        self.assertEqual(self._qty(), 5)

        detail = self.owner_client.get(f"{BASE}{body['saleId']}/").json()
        self.assertEqual(detail["paymentMethod"], "CASH")
        self.assertEqual(detail["items"][0]["sku"], "SALE-1")
        self.assertEqual(detail["items"][0]["lineTotal"], "100.00")

    def test_lowercase_payment_method_is_accepted(self):
        self.assertEqual(self._sell(1, method="card").status_code, 201)

    def test_insufficient_stock_is_400(self):
        res = self._sell(11)
        self.assertEqual(res.status_code, 400)
        self.assertIn("Insufficient stock", res.json()["detail"])

    def test_invalid_payment_method_is_400(self):
        self.assertEqual(self._sell(1, method="CHEQUE").status_code, 400)

    def test_list_filters_by_payment_method(self):
        self._sell(1, method="CASH")
        self._sell(1, method="UPI")

        self.assertEqual(len(self.owner_client.get(BASE).json()), 2)
        upi = self.owner_client.get(BASE, {"paymentMethod": "UPI"}).json()
        self.assertEqual([s["paymentMethod"] for s in upi], ["UPI"])

    def test_sales_of_other_shop_are_invisible(self):
        sale_id = self._sell(1).json()["saleId"]

        other = make_shop("Other")
        add_member(self.owner, other, ShopMembership.Role.OWNER)
        client = self.client_for(self.owner, shop=other)

        self.assertEqual(client.get(BASE).json(), [])
        self.assertEqual(client.get(f"{BASE}{sale_id}/").status_code, 404)

    def test_customers(self):
        res = self.owner_client.post(
            f"{BASE}customers/", {"name": "Ravi", "phone": "555"}, format="json"
        )
        self.assertEqual(res.status_code, 201)

        res = self._sell(1, customerId=res.json()["id"])
        self.assertEqual(res.status_code, 201)

        names = [c["name"] for c in self.owner_client.get(f"{BASE}customers/").json()]
        self.assertEqual(names, ["Ravi"])

    # =====================================================
    # ROLES
    # =====================================================

    def test_staff_cannot_read_sales_or_customers(self):
        sale_id = self._sell(1).json()["saleId"]

        self.assertEqual(self.client.get(BASE).status_code, 403)
        self.assertEqual(self.client.get(f"{BASE}{sale_id}/").status_code, 403)
        self.assertEqual(self.client.get(f"{BASE}customers/").status_code, 403)
        self.assertEqual(
            self.client.post(f"{BASE}customers/", {"name": "Ravi"}, format="json").status_code,
            403,
        )

    def test_manager_reads_sales(self):
        manager = make_user("manager@example.com")
        add_member(manager, self.shop, ShopMembership.Role.MANAGER)
        self._sell(1)

        res = self.client_for(manager).get(BASE)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.json()), 1)

    # =====================================================
    # INPUT BOUNDS
    # =====================================================

    def test_price_beyond_column_is_400_and_nothing_is_sold(self):
        for price in ("1000000000000", "1e30"):
            with self.subTest(price=price):
                res = self._sell(1, price=price)
                self.assertEqual(res.status_code, 400)

        self.assertFalse(Sale.objects.exists())
        self.assertEqual(self._qty(), 10)

    def test_quantity_beyond_column_is_400(self):
        res = self._sell(10**19)
        self.assertEqual(res.status_code, 400)
        self.assertFalse(Sale.objects.exists())

    def test_total_beyond_column_is_400_and_nothing_is_sold(self):
        res = self._sell(200, price="9999999999.99")

        self.assertEqual(res.status_code, 400)
        self.assertIn("total_amount", res.json()["detail"])
        self.assertFalse(Sale.objects.exists())
        self.assertEqual(self._qty(), 10)
