# products/tests/test_concurrency.py

from __future__ import annotations

import threading
from decimal import Decimal
from unittest import skipUnless

from django.db import connection, connections
from django.test import TransactionTestCase

from products.models import Product, StockMovement
from products.services.exceptions import InsufficientStock
from products.services.reconciliation import check_product_stock
from products.services.stock_ledger import record_entry, record_exit
from products.tests.helpers import make_product, make_supplier, make_user


def _run_threads(target, count):
    errors = []

    def worker(index):
        try:
            target(index)
        except Exception as exc:  # asserted by the caller
            errors.append(exc)
        finally:
            connections.close_all()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return errors


class ConcurrentStockMovementTests(TransactionTestCase):
    """
    Concurrent requests on the same product never lose an update and never
    take stock below zero.
    """

    def setUp(self):
        self.actor = make_user("reception-c")
        self.supplier = make_supplier()
        self.product = make_product()
        record_entry(
            product_id=self.product.pk,
            quantity=20,
            actor_id=self.actor.pk,
            supplier_id=self.supplier.pk,
        )

    def test_concurrent_exits_never_oversell(self):
        outcomes = {"ok": 0, "rejected": 0}
        outcome_lock = threading.Lock()

        def take_three(_):
            try:
                record_exit(product_id=self.product.pk, quantity=3, actor_id=self.actor.pk)
            except InsufficientStock:
                with outcome_lock:
                    outcomes["rejected"] += 1
            else:
                with outcome_lock:
                    outcomes["ok"] += 1

        errors = _run_threads(take_three, 10)

        self.assertEqual(errors, [])
        self.assertEqual(outcomes, {"ok": 6, "rejected": 4})

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_current, Decimal("2.00"))
        self.assertEqual(
            StockMovement.objects.filter(product=self.product, movement_type="EXIT").count(), 6
        )
        self.assertIsNone(check_product_stock(self.product))

    def test_concurrent_mixed_movements_keep_every_update(self):
        def move(index):
            if index % 2 == 0:
                record_entry(
                    product_id=self.product.pk,
                    quantity=2,
                    actor_id=self.actor.pk,
                    supplier_id=self.supplier.pk,
                )
            else:
                record_exit(product_id=self.product.pk, quantity=1, actor_id=self.actor.pk)

        errors = _run_threads(move, 20)

        self.assertEqual(errors, [])
        self.product.refresh_from_db()
        # 20 + 10 * 2 - 10 * 1
        self.assertEqual(self.product.stock_current, Decimal("30.00"))
        self.assertEqual(StockMovement.objects.filter(product=self.product).count(), 21)
        self.assertIsNone(check_product_stock(self.product))

    @skipUnless(connection.vendor == "postgresql", "needs row-level locking across connections")
    def test_different_products_proceed_independently(self):
        products = [make_product(f"P-{i}", f"Product {i}") for i in range(4)]

        def fill(index):
            product = products[index % 4]
            record_entry(
                product_id=product.pk,
                quantity=1,
                actor_id=self.actor.pk,
                supplier_id=self.supplier.pk,
            )

        errors = _run_threads(fill, 16)

        self.assertEqual(errors, [])
        for product in Product.objects.filter(pk__in=[p.pk for p in products]):
            self.assertEqual(product.stock_current, Decimal("4.00"))
