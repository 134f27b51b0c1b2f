# products/management/commands/verify_stock_ledger.py

from __future__ import annotations

from django.core.management.base import BaseCommand

from products.models import Product
from products.services.reconciliation import find_stock_discrepancies


class Command(BaseCommand):
    help = "Verify Product.stock_current against the stock movement ledger."

    def add_arguments(self, parser):
        parser.add_argument(
            "--product",
            dest="product_code",
            help="Only check the product with this code (optional)",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any discrepancy is found.",
        )

    def handle(self, *args, **options):
        strict = bool(options.get("strict"))
        code = (options.get("product_code") or "").strip().upper()

        products = Product.objects.all()
        if code:
            products = products.filter(code=code)
            if not products.exists():
                self.stderr.write(self.style.ERROR(f"Unknown product code: {code}"))
                return self._exit(strict)

        self.stdout.write(self.style.MIGRATE_HEADING("Stock Ledger Verification"))
        self.stdout.write(f"Products checked: {products.count()}")
        self.stdout.write("")

        discrepancies = find_stock_discrepancies(products)

        for d in discrepancies:
            if d.stock_mismatch:
                self.stderr.write(
                    self.style.ERROR(
                        f"[FAIL] {d.product_code}: stock_current={d.stock_current} "
                        f"ledger={d.ledger_stock}"
                    )
                )
            if d.broken_links:
                self.stderr.write(
                    self.style.ERROR(
                        f"[FAIL] {d.product_code}: broken snapshot chain at "
                        f"{len(d.broken_links)} movement(s)"
                    )
                )
                self.stderr.write("  Example IDs: " + ", ".join(d.broken_links[:10]))

        self.stdout.write("")
        if not discrepancies:
            self.stdout.write(self.style.SUCCESS("[OK] Stock matches the ledger"))
        else:
            self.stderr.write(
                self.style.ERROR(f"VERIFICATION FOUND ISSUES: {len(discrepancies)} product(s)")
            )

        return self._exit(strict and bool(discrepancies))

    def _exit(self, fail: bool):
        if fail:
            raise SystemExit(1)
        return None
