# products/tests/test_reconciliation.py

from __future__ import annotations

from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from products.models import Product, StockMovement
from products.services.reconciliation import check_product_stock, find_stock_discrepancies
from products.services.stock_ledger import record_adjustment, record_entry, record_exit
from products.tests.helpers import make_product, make_supplier, make_user


class ReconciliationTests(TestCase):
    """
    stock_current must always equal the stock_after of the latest movement,
    and every movement must start where the previous one ended.
    """

    def setUp(self):
        self.actor = make_user("admin1", role="admin")
        self.supplier = make_supplier()
        self.product = make_product()

    def _run_history(self):
        record_entry(
            product_id=self.product.pk,
            quantity=10,
            actor_id=self.actor.pk,
            supplier_id=self.supplier.pk,
        )
        record_exit(product_id=self.product.pk, quantity=4, actor_id=self.actor.pk)
        record_adjustment(product_id=self.product.pk, new_quantity=9, actor_id=self.actor.pk)
        self.product.refresh_from_db()

    def test_ledger_driven_history_is_consistent(self):
        self._run_history()

        self.assertEqual(self.product.stock_current, Decimal("9.00"))
        self.assertIsNone(check_product_stock(self.product))
        self.assertEqual(find_stock_discrepancies(), [])

    def test_product_without_movements_must_be_zero(self):
        self.assertIsNone(check_product_stock(self.product))

    def test_detects_stock_changed_outside_the_ledger(self):
        self._run_history()
        Product.objects.filter(pk=self.product.pk).update(stock_current=Decimal("42.00"))
        self.product.refresh_from_db()

        discrepancy = check_product_stock(self.product)

        self.assertIsNotNone(discrepancy)
        self.assertTrue(discrepancy.stock_mismatch)
        self.assertEqual(discrepancy.ledger_stock, Decimal("9.00"))
        self.assertEqual(discrepancy.stock_current, Decimal("42.00"))
        self.assertEqual(discrepancy.broken_links, [])

    def test_detects_broken_snapshot_chain(self):
        record_entry(
            product_id=self.product.pk,
            quantity=5,
            actor_id=self.actor.pk,
            supplier_id=self.supplier.pk,
        )
        rogue = StockMovement(
            product=self.product,
            movement_type=StockMovement.MovementType.ADJUSTMENT,
            quantity=Decimal("2.00"),
            quantity_delta=Decimal("-2.00"),
            performed_by=self.actor,
            stock_before=Decimal("9.00"),
            stock_after=Decimal("7.00"),
        )
        rogue.save()
        self.product.refresh_from_db()

        discrepancy = check_product_stock(self.product)

        self.assertEqual(discrepancy.broken_links, [str(rogue.pk)])

    def test_verify_command_reports_ok(self):
        self._run_history()
        out = StringIO()

        call_command("verify_stock_ledger", "--strict", stdout=out, stderr=StringIO())

        self.assertIn("[OK] Stock matches the ledger", out.getvalue())

    def test_verify_command_strict_fails_on_discrepancy(self):
        self._run_history()
        Product.objects.filter(pk=self.product.pk).update(stock_current=Decimal("1.00"))
        err = StringIO()

        with self.assertRaises(SystemExit):
            call_command("verify_stock_ledger", "--strict", stdout=StringIO(), stderr=err)

        self.assertIn(self.product.code, err.getvalue())

    def test_verify_command_single_product(self):
        other = make_product("IVER-1", "Ivermectin 1%")
        Product.objects.filter(pk=other.pk).update(stock_current=Decimal("3.00"))
        out = StringIO()

        call_command(
            "verify_stock_ledger", "--product", self.product.code.lower(), "--strict",
            stdout=out, stderr=StringIO(),
        )

        self.assertIn("Products checked: 1", out.getvalue())
