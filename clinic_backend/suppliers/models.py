# suppliers/models.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models


class Supplier(models.Model):
    """
    Supplier master.

    Suppliers are referenced by ENTRY stock movements and are never physically
    deleted once referenced: deactivate with is_active=False instead.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    tax_id = models.CharField(max_length=50, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    email = models.EmailField(max_length=100, blank=True, default="")
    address = models.CharField(max_length=500, blank=True, default="")
    notes = models.CharField(max_length=1000, blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="supplier_name_idx"),
            models.Index(fields=["is_active"], name="supplier_active_idx"),
            models.Index(fields=["tax_id"], name="supplier_tax_id_idx"),
        ]

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "name is required"})

    def __str__(self):
        return self.name
