# suppliers/services/directory.py

"""
SUPPLIER DIRECTORY

Resolves the supplying party of an ENTRY movement.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError

from products.services.exceptions import ReferenceNotFound
from suppliers.models import Supplier


def get_supplier(supplier_id) -> Supplier:
    if supplier_id in (None, ""):
        raise ReferenceNotFound("Supplier", supplier_id)

    try:
        return Supplier.objects.get(pk=supplier_id)
    except (Supplier.DoesNotExist, ValidationError, ValueError):
        raise ReferenceNotFound("Supplier", supplier_id)
