# products/tests/helpers.py

from decimal import Decimal

from django.contrib.auth import get_user_model

from products.models import Product
from products.services.stock_ledger import record_adjustment
from suppliers.models import Supplier

User = get_user_model()


def make_user(username: str, role: str = User.ROLE_RECEPTION) -> User:
    return User.objects.create_user(
        email=f"{username}@example.com",
        username=username,
        password="password123",
        role=role,
    )


def make_supplier(name: str = "VetPharma") -> Supplier:
    return Supplier.objects.create(name=name)


def make_product(code: str = "AMOX-250", name: str = "Amoxicillin 250mg", **extra) -> Product:
    return Product.objects.create(code=code, name=name, **extra)


def stock_product(product: Product, quantity, actor) -> Product:
    """Bring a product to an exact stock level through the ledger."""
    if Decimal(str(quantity)) != Decimal(product.stock_current):
        record_adjustment(product_id=product.pk, new_quantity=quantity, actor_id=actor.pk)
    product.refresh_from_db()
    return product
