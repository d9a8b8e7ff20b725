from django.test import TestCase, override_settings

from inventory.models import StockMovement, StockSnapshot
from inventory.services import projections
from inventory.services.exceptions import LedgerValidationError, NotFoundError
from inventory.services.ledger import adjust_stock
from products.models import Product
from shops.tests.factories import make_item, make_shop, make_user, stock_in


class ListAndGetItemTests(TestCase):
    """
    Read projections: product ⋈ snapshot.

    GUARANTEES:
    - Only active products of the shop are listed
    - Never-stocked products read as quantity 0 and sort last
    - Reads are idempotent and write nothing
    """

    def setUp(self):
        self.user = make_user()
        self.shop = make_shop()
        self.other_shop = make_shop("Other")

        self.rice = make_item(self.shop, self.user, sku="RICE-1", name="Basmati Rice", quantity=3)
        self.oil = make_item(self.shop, self.user, sku="OIL-1", name="Sunflower Oil", quantity=8)
        self.bare = Product.objects.create(shop=self.shop, sku="BARE-1", name="Bare Product")
        make_item(self.other_shop, self.user, sku="RICE-1", name="Other Rice", quantity=1)

    def test_list_is_shop_scoped_and_projects_quantity(self):
        rows = projections.list_items(shop=self.shop)
        self.assertEqual({r["sku"] for r in rows}, {"RICE-1", "OIL-1", "BARE-1"})

        by_sku = {r["sku"]: r for r in rows}
        self.assertEqual(by_sku["RICE-1"]["quantity"], 3)
        self.assertEqual(by_sku["BARE-1"]["quantity"], 0)
        self.assertIsNone(by_sku["BARE-1"]["last_updated"])

    def test_most_recently_updated_first_never_stocked_last(self):
        stock_in(self.shop, self.user, self.rice["id"], 1)

        rows = projections.list_items(shop=self.shop)
        self.assertEqual(rows[0]["sku"], "RICE-1")
        self.assertEqual(rows[-1]["sku"], "BARE-1")

    def test_search_matches_name_or_sku_case_insensitively(self):
        self.assertEqual(
            [r["sku"] for r in projections.list_items(shop=self.shop, search="rice")],
            ["RICE-1"],
        )
        self.assertEqual(
            [r["sku"] for r in projections.list_items(shop=self.shop, search="oil-")],
            ["OIL-1"],
        )

    def test_inactive_products_are_hidden(self):
        Product.objects.filter(id=self.oil["id"]).update(is_active=False)

        skus = {r["sku"] for r in projections.list_items(shop=self.shop)}
        self.assertNotIn("OIL-1", skus)
        with self.assertRaises(NotFoundError):
            projections.get_item(shop=self.shop, product_id=self.oil["id"])

    def test_get_item_of_other_shop_is_not_found(self):
        with self.assertRaises(NotFoundError):
            projections.get_item(shop=self.other_shop, product_id=self.rice["id"])

    def test_reads_are_idempotent(self):
        versions = list(StockSnapshot.objects.values_list("version", flat=True).order_by("pk"))
        movements = StockMovement.objects.count()

        first = projections.list_items(shop=self.shop)
        second = projections.list_items(shop=self.shop)

        self.assertEqual(first, second)
        self.assertEqual(
            projections.get_item(shop=self.shop, product_id=self.rice["id"]),
            projections.get_item(shop=self.shop, product_id=self.rice["id"]),
        )
        self.assertEqual(
            list(StockSnapshot.objects.values_list("version", flat=True).order_by("pk")),
            versions,
        )
        self.assertEqual(StockMovement.objects.count(), movements)


class StockHistoryTests(TestCase):
    """
    GUARANTEES:
    - Newest movement first, delta negative for OUT
    - limit defaults to 10 and must be within 1..100
    """

    def setUp(self):
        self.user = make_user()
        self.shop = make_shop()
        self.item = make_item(self.shop, self.user, quantity=5)

    def test_history_shape_and_sign(self):
        adjust_stock(
            shop=self.shop,
            actor=self.user,
            product_id=self.item["id"],
            quantity=2,
            movement_type=StockMovement.MovementType.OUT,
            source=StockMovement.Source.DAMAGE,
        )

        history = projections.get_stock_history(shop=self.shop, product_id=self.item["id"])
        self.assertEqual(len(history), 2)
        self.assertEqual(history[0]["reason"], StockMovement.Source.DAMAGE)
        self.assertEqual(history[0]["delta"], -2)
        self.assertEqual(history[1]["reason"], StockMovement.Source.MANUAL)
        self.assertEqual(history[1]["delta"], 5)

    def test_default_limit(self):
        for _ in range(11):
            stock_in(self.shop, self.user, self.item["id"], 1)

        history = projections.get_stock_history(shop=self.shop, product_id=self.item["id"])
        self.assertEqual(len(history), 10)

        limited = projections.get_stock_history(
            shop=self.shop, product_id=self.item["id"], limit=3
        )
        self.assertEqual(len(limited), 3)

    def test_limit_out_of_range_is_rejected(self):
        for limit in (0, -1, 101, "abc"):
            with self.subTest(limit=limit):
                with self.assertRaises(LedgerValidationError):
                    projections.get_stock_history(
                        shop=self.shop, product_id=self.item["id"], limit=limit
                    )


class LowStockTests(TestCase):
    """
    GUARANTEES:
    - Only 0 < quantity <= threshold, active products, ascending quantity
    - Without an explicit threshold each row uses its reorder_level,
      falling back to LOW_STOCK_THRESHOLD when reorder_level is 0
    """

    def setUp(self):
        self.user = make_user()
        self.shop = make_shop()

        make_item(self.shop, self.user, sku="A", name="A item", quantity=3)
        make_item(self.shop, self.user, sku="B", name="B item", quantity=8, reorder_level=10)
        make_item(self.shop, self.user, sku="C", name="C item", quantity=0, reorder_level=10)
        make_item(self.shop, self.user, sku="D", name="D item", quantity=6)
        gone = make_item(self.shop, self.user, sku="E", name="E item", quantity=1)
        Product.objects.filter(id=gone["id"]).update(is_active=False)

    @override_settings(LOW_STOCK_THRESHOLD=5)
    def test_per_item_threshold(self):
        rows = projections.low_stock(shop=self.shop)
        self.assertEqual([r["sku"] for r in rows], ["A", "B"])

    def test_explicit_threshold(self):
        self.assertEqual([r["sku"] for r in projections.low_stock(shop=self.shop, threshold=5)], ["A"])
        self.assertEqual(
            [r["sku"] for r in projections.low_stock(shop=self.shop, threshold=6)], ["A", "D"]
        )

    def test_negative_threshold_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            projections.low_stock(shop=self.shop, threshold=-1)
