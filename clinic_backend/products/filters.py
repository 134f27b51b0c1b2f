# products/filters.py

import django_filters

from products.models import StockMovement


class StockMovementFilter(django_filters.FilterSet):
    """
    GET /api/inventory/movements/?product=<uuid>&movement_type=EXIT
        &date_from=2026-01-01&date_to=2026-01-31

    date_to is inclusive for the whole day.
    """

    product = django_filters.UUIDFilter(field_name="product_id")
    movement_type = django_filters.ChoiceFilter(
        choices=StockMovement.MovementType.choices
    )
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    supplier = django_filters.UUIDFilter(field_name="supplier_id")
    performed_by = django_filters.UUIDFilter(field_name="performed_by_id")

    class Meta:
        model = StockMovement
        fields = ["product", "movement_type", "supplier", "performed_by", "date_from", "date_to"]
