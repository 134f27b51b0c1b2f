# users/services/directory.py

"""
ACTOR DIRECTORY

Resolves the staff member performing a stock movement.
Deactivated users still resolve: historical movements must keep pointing at them.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError

from products.services.exceptions import ReferenceNotFound
from users.models import User


def get_actor(actor_id) -> User:
    if actor_id in (None, ""):
        raise ReferenceNotFound("User", actor_id)

    try:
        return User.objects.get(pk=actor_id)
    except (User.DoesNotExist, ValidationError, ValueError):
        raise ReferenceNotFound("User", actor_id)
