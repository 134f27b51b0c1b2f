# products/management/commands/seed_inventory.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from products.models import Category, Product
from products.services.stock_ledger import record_entry
from suppliers.models import Supplier

User = get_user_model()


class Command(BaseCommand):
    help = "Seed categories, products, a supplier and opening stock (ENTRY movements)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding inventory..."))

        # -------------------------------
        # SEED ACTOR
        # -------------------------------
        actor = User.objects.filter(username="inventory-seed").first()
        if actor is None:
            actor = User.objects.create_user(
                username="inventory-seed",
                email="inventory-seed@local.test",
                password=None,
                role=User.ROLE_ADMIN,
            )

        # -------------------------------
        # CATEGORIES
        # -------------------------------
        categories = [
            "Antibiotics",
            "Antiparasitics",
            "Vaccines",
            "Surgical Supplies",
            "Pet Food",
        ]

        category_objs = {}
        for name in categories:
            obj, _ = Category.objects.get_or_create(name=name)
            category_objs[name] = obj

        supplier, _ = Supplier.objects.get_or_create(
            name="VetPharma Distribuciones",
            defaults={"tax_id": "VPD-0001", "email": "orders@vetpharma.test"},
        )

        # -------------------------------
        # PRODUCTS + OPENING STOCK
        # -------------------------------
        products_data = [
            ("AMOX-250", "Amoxicillin 250mg", "Antibiotics", "tablet", 40, 10),
            ("IVER-1", "Ivermectin 1%", "Antiparasitics", "ml", 25, 5),
            ("RAB-VAC", "Rabies Vaccine", "Vaccines", "dose", 30, 8),
            ("GAUZE-10", "Sterile Gauze 10x10", "Surgical Supplies", "pack", 60, 15),
            ("KIB-ADULT", "Adult Dog Kibble 15kg", "Pet Food", "bag", 12, 3),
        ]

        for code, name, cat, unit, opening, minimum in products_data:
            product, created = Product.objects.get_or_create(
                code=code,
                defaults={
                    "name": name,
                    "category": category_objs[cat],
                    "unit_of_measure": unit,
                    "stock_min": Decimal(minimum),
                },
            )
            if created:
                record_entry(
                    product_id=product.pk,
                    quantity=opening,
                    actor_id=actor.pk,
                    supplier_id=supplier.pk,
                    reason="Opening stock",
                )

        self.stdout.write(
            self.style.SUCCESS("Inventory seeded successfully.")
        )
