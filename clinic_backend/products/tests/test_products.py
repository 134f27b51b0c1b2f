# products/tests/test_products.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from products.models import Product, StockMovement
from products.services.registry import low_stock_products, overstocked_products, set_current_stock
from products.services.stock_ledger import record_entry, record_exit
from products.tests.helpers import make_product, make_supplier, make_user, stock_product


class ProductModelTests(TestCase):
    """
    Product integrity.

    GUARANTEES:
    - products start at zero stock
    - stock_current only moves through the ledger
    - codes are normalized
    """

    def setUp(self):
        self.actor = make_user("stock_admin", role="admin")

    def test_new_product_starts_at_zero(self):
        product = make_product(code="  para-500 ", name="Paracetamol 500mg")

        self.assertEqual(product.stock_current, Decimal("0.00"))
        self.assertEqual(product.code, "PARA-500")

    def test_cannot_create_with_stock(self):
        with self.assertRaises(ValidationError):
            Product.objects.create(code="X-1", name="X", stock_current=Decimal("5.00"))

    def test_save_refuses_direct_stock_change(self):
        product = make_product()
        product.stock_current = Decimal("99.00")

        with self.assertRaises(ValidationError):
            product.save()

        product.refresh_from_db()
        self.assertEqual(product.stock_current, Decimal("0.00"))

    def test_stale_instance_catalog_edit_keeps_ledger_stock(self):
        product = make_product()
        stale = Product.objects.get(pk=product.pk)
        record_entry(
            product_id=product.pk,
            quantity=5,
            actor_id=self.actor.pk,
            supplier_id=make_supplier().pk,
        )

        # stale still carries 0 but only edits the catalog
        stale.name = "Renamed"
        stale.save()

        self.assertEqual(stale.stock_current, Decimal("5.00"))
        fresh = Product.objects.get(pk=product.pk)
        self.assertEqual(fresh.stock_current, Decimal("5.00"))
        self.assertEqual(fresh.name, "Renamed")

    def test_created_instance_can_be_edited_after_movements(self):
        product = make_product()
        stock_product(product, 10, self.actor)

        product.stock_min = Decimal("2.00")
        product.save()

        product.refresh_from_db()
        self.assertEqual(product.stock_current, Decimal("10.00"))
        self.assertEqual(product.stock_min, Decimal("2.00"))

    def test_update_fields_naming_stock_is_refused(self):
        product = make_product()

        with self.assertRaises(ValidationError):
            product.save(update_fields=["name", "stock_current"])

    def test_stock_min_cannot_exceed_stock_max(self):
        with self.assertRaises(ValidationError):
            make_product(stock_min=Decimal("10"), stock_max=Decimal("5"))

    def test_negative_cost_rejected(self):
        with self.assertRaises(ValidationError):
            make_product(cost=Decimal("-1"))

    def test_registry_refuses_negative_stock(self):
        product = make_product()

        with self.assertRaises(ValidationError):
            set_current_stock(product, Decimal("-1.00"))


class StockAlertTests(TestCase):
    def setUp(self):
        self.actor = make_user("alerts_admin", role="admin")

    def test_low_stock_is_inclusive_and_advisory(self):
        product = make_product(stock_min=Decimal("5"))
        stock_product(product, 6, self.actor)
        self.assertFalse(product.is_low_stock)

        record_exit(product_id=product.pk, quantity=1, actor_id=self.actor.pk)
        product.refresh_from_db()

        self.assertTrue(product.is_low_stock)
        self.assertEqual(list(low_stock_products()), [product])

        # stays advisory: exits below the minimum are still accepted
        record_exit(product_id=product.pk, quantity=4, actor_id=self.actor.pk)
        self.assertEqual(StockMovement.objects.filter(product=product).count(), 3)

    def test_overstock(self):
        product = make_product(stock_max=Decimal("10"))
        stock_product(product, 10, self.actor)
        self.assertFalse(product.is_overstocked)

        stock_product(product, 11, self.actor)

        self.assertTrue(product.is_overstocked)
        self.assertEqual(list(overstocked_products()), [product])

    def test_products_without_thresholds_never_alert(self):
        product = make_product()

        self.assertFalse(product.is_low_stock)
        self.assertFalse(product.is_overstocked)
        self.assertEqual(list(low_stock_products()), [])

    def test_inactive_products_are_not_alerted(self):
        product = make_product(stock_min=Decimal("5"), is_active=False)

        self.assertTrue(product.is_low_stock)
        self.assertEqual(list(low_stock_products()), [])


class StockMovementImmutabilityTests(TestCase):
    def setUp(self):
        self.actor = make_user("immut_admin", role="admin")
        self.product = make_product()
        stock_product(self.product, 5, self.actor)
        self.movement = StockMovement.objects.get(product=self.product)

    def test_cannot_update_movement(self):
        self.movement.reason = "changed"
        with self.assertRaises(ValidationError):
            self.movement.save()

    def test_cannot_delete_movement(self):
        with self.assertRaises(ValidationError):
            self.movement.delete()

    def test_cannot_bulk_delete_or_update(self):
        with self.assertRaises(ValidationError):
            StockMovement.objects.filter(pk=self.movement.pk).delete()
        with self.assertRaises(ValidationError):
            StockMovement.objects.filter(pk=self.movement.pk).update(reason="x")

    def test_model_rejects_inconsistent_snapshot(self):
        bad = StockMovement(
            product=self.product,
            movement_type=StockMovement.MovementType.EXIT,
            quantity=Decimal("1.00"),
            quantity_delta=Decimal("-1.00"),
            performed_by=self.actor,
            stock_before=Decimal("5.00"),
            stock_after=Decimal("3.00"),
        )
        with self.assertRaises(ValidationError):
            bad.save()
