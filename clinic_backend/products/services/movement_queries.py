# products/services/movement_queries.py

"""
MOVEMENT QUERIES (read-only)

All results are newest first (created_at desc, id desc) and only ever
contain committed movements. Nothing here takes locks.
"""

from __future__ import annotations

import datetime

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from products.models import StockMovement
from products.services.exceptions import BusinessRuleViolation
from products.services.registry import get_product


def _base_queryset():
    return StockMovement.objects.select_related(
        "product", "performed_by", "supplier"
    ).newest_first()


def _as_datetime(value, *, field_name: str, end_of_day: bool = False) -> datetime.datetime:
    """
    Accepts a datetime, a date or an ISO string.

    A bare date covers the whole day: start of day for lower bounds,
    end of day for upper bounds.
    """
    if value in (None, ""):
        raise BusinessRuleViolation(f"{field_name} is required")

    if isinstance(value, str):
        parsed = parse_datetime(value)
        if parsed is None:
            parsed_date = parse_date(value)
            if parsed_date is None:
                raise BusinessRuleViolation(f"{field_name} must be an ISO date or datetime")
            value = parsed_date
        else:
            value = parsed

    if isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, datetime.date):
        bound = datetime.time.max if end_of_day else datetime.time.min
        dt = datetime.datetime.combine(value, bound)
    else:
        raise BusinessRuleViolation(f"{field_name} must be an ISO date or datetime")

    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt)
    return dt


def _date_bounds(date_from, date_to):
    start = _as_datetime(date_from, field_name="date_from")
    end = _as_datetime(date_to, field_name="date_to", end_of_day=True)
    if start > end:
        raise BusinessRuleViolation("date_from must be before or equal to date_to")
    return start, end


def by_product(product_id):
    product = get_product(product_id)
    return _base_queryset().filter(product=product)


def by_type(movement_type):
    value = (str(movement_type or "")).strip().upper()
    if value not in StockMovement.MovementType.values:
        raise BusinessRuleViolation(f"invalid movement type: {movement_type}")
    return _base_queryset().filter(movement_type=value)


def by_date_range(date_from, date_to):
    start, end = _date_bounds(date_from, date_to)
    return _base_queryset().filter(created_at__gte=start, created_at__lte=end)


def by_product_and_date_range(product_id, date_from, date_to):
    product = get_product(product_id)
    start, end = _date_bounds(date_from, date_to)
    return _base_queryset().filter(
        product=product, created_at__gte=start, created_at__lte=end
    )


def latest_for_product(product_id):
    """Most recent movement of a product, or None."""
    return by_product(product_id).first()
