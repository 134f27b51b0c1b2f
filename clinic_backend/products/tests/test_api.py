# products/tests/test_api.py

from __future__ import annotations

import uuid
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from products.models import Product, StockMovement
from products.services.exceptions import PersistenceFailure
from products.tests.helpers import make_product, make_supplier, make_user, stock_product

MOVEMENTS = "/api/inventory/movements/"
PRODUCTS = "/api/products/products/"


class MovementApiTests(TestCase):
    """
    /api/inventory/movements/

    GUARANTEES:
    - the acting user is always request.user
    - domain errors use the canonical {"error": {...}} body
    - capabilities gate each command
    """

    def setUp(self):
        self.client = APIClient()
        self.reception = make_user("reception", role="reception")
        self.vet = make_user("vet", role="vet")
        self.student = make_user("student", role="student")
        self.supplier = make_supplier()
        self.product = make_product()

    def _as(self, user):
        self.client.force_authenticate(user=user)
        return self.client

    # -----------------------------
    # Commands
    # -----------------------------
    def test_entry_created(self):
        res = self._as(self.reception).post(
            f"{MOVEMENTS}entry/",
            {
                "product_id": str(self.product.pk),
                "quantity": "12",
                "supplier_id": str(self.supplier.pk),
                "unit_price": "2.40",
                "reason": "Monthly order",
            },
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["movement_type"], "ENTRY")
        self.assertEqual(res.data["stock_after"], "12.00")
        self.assertEqual(res.data["performed_by"], self.reception.pk)
        self.assertEqual(res.data["supplier_name"], self.supplier.name)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_current, Decimal("12.00"))

    def test_entry_without_supplier_is_business_rule_violation(self):
        res = self._as(self.reception).post(
            f"{MOVEMENTS}entry/",
            {"product_id": str(self.product.pk), "quantity": "1"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "BUSINESS_RULE_VIOLATION")
        self.assertEqual(res.data["error"]["message"], "supplier required for entry")

    def test_exit_insufficient_stock_is_conflict(self):
        stock_product(self.product, 3, self.reception)

        res = self._as(self.vet).post(
            f"{MOVEMENTS}exit/",
            {"product_id": str(self.product.pk), "quantity": "5"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(res.data["error"]["available"], "3.00")
        self.assertEqual(res.data["error"]["requested"], "5.00")

    def test_exit_by_vet(self):
        stock_product(self.product, 3, self.reception)

        res = self._as(self.vet).post(
            f"{MOVEMENTS}exit/",
            {"product_id": str(self.product.pk), "quantity": "2", "notes": "Surgery #114"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["quantity_delta"], "-2.00")
        self.assertEqual(res.data["performed_by"], self.vet.pk)

    def test_adjustment(self):
        stock_product(self.product, 8, self.reception)

        res = self._as(self.reception).post(
            f"{MOVEMENTS}adjustment/",
            {"product_id": str(self.product.pk), "quantity": "3", "reason": "Count"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["quantity"], "5.00")
        self.assertEqual(res.data["stock_after"], "3.00")

    def test_unknown_product_is_not_found(self):
        res = self._as(self.reception).post(
            f"{MOVEMENTS}adjustment/",
            {"product_id": str(uuid.uuid4()), "quantity": "3"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_malformed_request_uses_field_errors(self):
        res = self._as(self.reception).post(
            f"{MOVEMENTS}exit/",
            {"quantity": "1"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("product_id", res.data)

    def test_persistence_failure_is_service_unavailable(self):
        with mock.patch(
            "products.services.stock_ledger.record_exit",
            side_effect=PersistenceFailure("timed out waiting for stock lock"),
        ):
            res = self._as(self.reception).post(
                f"{MOVEMENTS}exit/",
                {"product_id": str(self.product.pk), "quantity": "1"},
                format="json",
            )

        self.assertEqual(res.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(res.data["error"]["code"], "PERSISTENCE_FAILURE")
        self.assertTrue(res.data["error"]["retryable"])

    # -----------------------------
    # Capabilities
    # -----------------------------
    def test_vet_cannot_receive_or_adjust(self):
        client = self._as(self.vet)
        entry = client.post(
            f"{MOVEMENTS}entry/",
            {"product_id": str(self.product.pk), "quantity": "1", "supplier_id": str(self.supplier.pk)},
            format="json",
        )
        adjust = client.post(
            f"{MOVEMENTS}adjustment/",
            {"product_id": str(self.product.pk), "quantity": "1"},
            format="json",
        )

        self.assertEqual(entry.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(adjust.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(StockMovement.objects.exists())

    def test_student_is_read_only(self):
        client = self._as(self.student)

        self.assertEqual(client.get(MOVEMENTS).status_code, status.HTTP_200_OK)
        res = client.post(
            f"{MOVEMENTS}exit/",
            {"product_id": str(self.product.pk), "quantity": "1"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_is_rejected(self):
        res = APIClient().get(MOVEMENTS)

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    # -----------------------------
    # Queries
    # -----------------------------
    def test_list_filters(self):
        other = make_product("GAUZE-10", "Gauze")
        stock_product(self.product, 5, self.reception)
        stock_product(other, 2, self.reception)
        client = self._as(self.student)

        res = client.get(MOVEMENTS, {"product": str(other.pk)})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["product_code"], "GAUZE-10")

        res = client.get(MOVEMENTS, {"movement_type": "EXIT"})
        self.assertEqual(res.data["count"], 0)

    def test_by_product_route(self):
        stock_product(self.product, 5, self.reception)

        res = self._as(self.student).get(f"{MOVEMENTS}product/{self.product.pk}/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)

    def test_by_product_route_unknown_product(self):
        res = self._as(self.student).get(f"{MOVEMENTS}product/{uuid.uuid4()}/")

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_by_type_route_rejects_unknown_type(self):
        res = self._as(self.student).get(f"{MOVEMENTS}type/TRANSFER/")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "BUSINESS_RULE_VIOLATION")

    def test_date_range_route_requires_ordered_bounds(self):
        res = self._as(self.student).get(
            f"{MOVEMENTS}date-range/", {"date_from": "2026-02-02", "date_to": "2026-02-01"}
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_history_route(self):
        stock_product(self.product, 5, self.reception)
        today = self.product.stock_movements.first().created_at.date().isoformat()

        res = self._as(self.student).get(
            f"{MOVEMENTS}history/",
            {"product_id": str(self.product.pk), "date_from": today, "date_to": today},
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)

    def test_movements_cannot_be_edited_over_http(self):
        stock_product(self.product, 5, self.reception)
        movement = StockMovement.objects.get(product=self.product)
        client = self._as(self.reception)

        self.assertEqual(
            client.delete(f"{MOVEMENTS}{movement.pk}/").status_code,
            status.HTTP_405_METHOD_NOT_ALLOWED,
        )
        self.assertEqual(
            client.patch(f"{MOVEMENTS}{movement.pk}/", {"reason": "x"}, format="json").status_code,
            status.HTTP_405_METHOD_NOT_ALLOWED,
        )


class ProductApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.reception = make_user("reception-p", role="reception")
        self.vet = make_user("vet-p", role="vet")

    def test_create_product_ignores_stock(self):
        self.client.force_authenticate(user=self.reception)

        res = self.client.post(
            PRODUCTS,
            {"code": "rab-vac", "name": "Rabies Vaccine", "stock_current": "50", "stock_min": "5"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["code"], "RAB-VAC")
        self.assertEqual(res.data["stock_current"], "0.00")
        self.assertTrue(res.data["is_low_stock"])

    def test_update_cannot_touch_stock(self):
        product = make_product()
        stock_product(product, 7, self.reception)
        self.client.force_authenticate(user=self.reception)

        res = self.client.patch(
            f"{PRODUCTS}{product.pk}/",
            {"name": "Amoxicillin 250mg tabs", "stock_current": "1"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        product.refresh_from_db()
        self.assertEqual(product.stock_current, Decimal("7.00"))
        self.assertEqual(product.name, "Amoxicillin 250mg tabs")

    def test_vet_cannot_edit_catalog(self):
        self.client.force_authenticate(user=self.vet)

        res = self.client.post(PRODUCTS, {"code": "X", "name": "X"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_deactivates(self):
        product = make_product()
        self.client.force_authenticate(user=self.reception)

        res = self.client.delete(f"{PRODUCTS}{product.pk}/")

        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.get(pk=product.pk).is_active)

    def test_low_stock_alerts(self):
        low = make_product("LOW-1", "Low", stock_min=Decimal("2"))
        make_product("FINE-1", "Fine")
        self.client.force_authenticate(user=self.vet)

        res = self.client.get(f"{PRODUCTS}alerts/low-stock/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([row["id"] for row in res.data["results"]], [str(low.pk)])

    def test_overstock_alerts(self):
        big = make_product("BIG-1", "Big", stock_max=Decimal("1"))
        stock_product(big, 3, self.reception)
        self.client.force_authenticate(user=self.vet)

        res = self.client.get(f"{PRODUCTS}alerts/overstock/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
