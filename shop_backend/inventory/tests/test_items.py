from decimal import Decimal
from unittest import mock

from django.test import TestCase, override_settings

from inventory.models import StockMovement, StockSnapshot
from inventory.services.exceptions import LedgerValidationError, NotFoundError
from inventory.services.items import bulk_import, delete_item, update_item
from inventory.services.projections import get_item, get_stock_history
from products.models import Product
from shops.tests.factories import make_item, make_shop, make_user


def _row(sku, **overrides):
    row = {
        "name": f"Item {sku}",
        "sku": sku,
        "quantity": 2,
        "cost_price": "1.50",
        "selling_price": "3.00",
    }
    row.update(overrides)
    return row


class CreateItemTests(TestCase):
    """
    GUARANTEES:
    - Opening quantity is recorded as one IN / MANUAL movement
    - SKU is unique per shop, not globally
    - Money is quantized to 2 places
    """

    def setUp(self):
        self.user = make_user()
        self.shop = make_shop()

    def test_opening_quantity_goes_through_the_ledger(self):
        item = make_item(self.shop, self.user, quantity=7, reorder_level=2)

        self.assertEqual(item["quantity"], 7)
        self.assertEqual(item["reorder_level"], 2)

        movement = StockMovement.objects.get(product_id=item["id"])
        self.assertEqual(movement.movement_type, StockMovement.MovementType.IN)
        self.assertEqual(movement.source, StockMovement.Source.MANUAL)
        self.assertEqual(movement.quantity, 7)
        self.assertEqual(movement.created_by, self.user)

    def test_zero_opening_quantity_writes_snapshot_but_no_movement(self):
        item = make_item(self.shop, self.user, quantity=0)
        self.assertTrue(StockSnapshot.objects.filter(product_id=item["id"]).exists())
        self.assertFalse(StockMovement.objects.filter(product_id=item["id"]).exists())

    def test_duplicate_sku_in_same_shop_is_rejected(self):
        make_item(self.shop, self.user, sku="DUP")
        with self.assertRaises(LedgerValidationError):
            make_item(self.shop, self.user, sku="DUP")
        self.assertEqual(Product.objects.filter(shop=self.shop, sku="DUP").count(), 1)

    def test_same_sku_in_another_shop_is_allowed(self):
        make_item(self.shop, self.user, sku="SHARED")
        make_item(make_shop("Second"), self.user, sku="SHARED")
        self.assertEqual(Product.objects.filter(sku="SHARED").count(), 2)

    def test_values_beyond_columns_are_rejected(self):
        for overrides in (
            {"quantity": 2**31},
            {"reorder_level": 2**31},
            {"cost_price": "10000000000"},
            {"selling_price": "1e30"},
        ):
            with self.subTest(overrides=overrides):
                with self.assertRaises(LedgerValidationError):
                    make_item(self.shop, self.user, sku="BIG", **overrides)
        self.assertFalse(Product.objects.filter(sku="BIG").exists())

    def test_prices_are_quantized(self):
        item = make_item(self.shop, self.user, cost_price="2.345", selling_price="9.999")
        self.assertEqual(item["cost_price"], Decimal("2.35"))
        self.assertEqual(item["selling_price"], Decimal("10.00"))


class UpdateDeleteItemTests(TestCase):
    """
    GUARANTEES:
    - Updates never change quantity
    - Soft delete hides the item but keeps snapshot and history
    """

    def setUp(self):
        self.user = make_user()
        self.shop = make_shop()
        self.item = make_item(self.shop, self.user, sku="UPD-1", quantity=4)

    def test_update_changes_master_data_and_reorder_level(self):
        updated = update_item(
            shop=self.shop,
            product_id=self.item["id"],
            data={"name": "Renamed", "selling_price": "25.50", "reorder_level": 3},
        )
        self.assertEqual(updated["name"], "Renamed")
        self.assertEqual(updated["selling_price"], Decimal("25.50"))
        self.assertEqual(updated["reorder_level"], 3)
        self.assertEqual(updated["sku"], "UPD-1")

    def test_update_ignores_quantity(self):
        updated = update_item(shop=self.shop, product_id=self.item["id"], data={"quantity": 999})
        self.assertEqual(updated["quantity"], 4)
        self.assertEqual(StockMovement.objects.filter(product_id=self.item["id"]).count(), 1)

    def test_update_to_taken_sku_is_rejected(self):
        make_item(self.shop, self.user, sku="TAKEN")
        with self.assertRaises(LedgerValidationError):
            update_item(shop=self.shop, product_id=self.item["id"], data={"sku": "TAKEN"})

    def test_sku_taken_between_check_and_save_is_rejected(self):
        make_item(self.shop, self.user, sku="TAKEN")
        with mock.patch("inventory.services.items._sku_taken", return_value=False):
            with self.assertRaises(LedgerValidationError):
                update_item(shop=self.shop, product_id=self.item["id"], data={"sku": "TAKEN"})

        self.assertEqual(Product.objects.get(id=self.item["id"]).sku, "UPD-1")

    def test_update_with_blank_name_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            update_item(shop=self.shop, product_id=self.item["id"], data={"name": "  "})

    def test_soft_delete(self):
        result = delete_item(shop=self.shop, product_id=self.item["id"])
        self.assertEqual(result, {"id": self.item["id"], "deleted": True})

        with self.assertRaises(NotFoundError):
            get_item(shop=self.shop, product_id=self.item["id"])
        with self.assertRaises(NotFoundError):
            delete_item(shop=self.shop, product_id=self.item["id"])

        self.assertTrue(Product.objects.filter(id=self.item["id"], is_active=False).exists())
        self.assertEqual(StockSnapshot.objects.get(product_id=self.item["id"]).quantity_available, 4)
        self.assertEqual(StockMovement.objects.filter(product_id=self.item["id"]).count(), 1)

    def test_history_of_deleted_item_is_not_found(self):
        delete_item(shop=self.shop, product_id=self.item["id"])
        with self.assertRaises(NotFoundError):
            get_stock_history(shop=self.shop, product_id=self.item["id"])


class BulkImportTests(TestCase):
    """
    GUARANTEES:
    - All-or-nothing
    - Row errors name the offending row
    - Item count is bounded by BULK_IMPORT_MAX_ITEMS
    """

    def setUp(self):
        self.user = make_user()
        self.shop = make_shop()

    def test_imports_every_row(self):
        result = bulk_import(shop=self.shop, actor=self.user, items=[_row("B-1"), _row("B-2")])
        self.assertEqual(result["created"], 2)
        self.assertEqual({i["sku"] for i in result["items"]}, {"B-1", "B-2"})
        self.assertEqual(StockMovement.objects.filter(shop=self.shop).count(), 2)

    def test_invalid_row_rejects_whole_payload(self):
        with self.assertRaises(LedgerValidationError) as ctx:
            bulk_import(
                shop=self.shop,
                actor=self.user,
                items=[_row("B-1"), _row("B-2", quantity=-1)],
            )
        self.assertIn("items[1]", str(ctx.exception))
        self.assertFalse(Product.objects.filter(shop=self.shop).exists())

    def test_duplicate_sku_in_payload_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            bulk_import(shop=self.shop, actor=self.user, items=[_row("X"), _row("X")])

    def test_existing_sku_rolls_back_earlier_rows(self):
        make_item(self.shop, self.user, sku="EXISTING")

        with self.assertRaises(LedgerValidationError):
            bulk_import(
                shop=self.shop,
                actor=self.user,
                items=[_row("NEW-1"), _row("EXISTING")],
            )

        self.assertFalse(Product.objects.filter(sku="NEW-1").exists())

    def test_empty_payload_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            bulk_import(shop=self.shop, actor=self.user, items=[])

    @override_settings(BULK_IMPORT_MAX_ITEMS=2)
    def test_too_many_rows_are_rejected(self):
        with self.assertRaises(LedgerValidationError):
            bulk_import(
                shop=self.shop,
                actor=self.user,
                items=[_row("M-1"), _row("M-2"), _row("M-3")],
            )
