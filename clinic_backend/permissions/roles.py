# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
# They describe what the staff member does at the clinic.
ROLE_ADMIN = "admin"
ROLE_VET = "vet"
ROLE_RECEPTION = "reception"
ROLE_STUDENT = "student"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_VET,
    ROLE_RECEPTION,
    ROLE_STUDENT,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_INVENTORY_VIEW = "inventory.view"
CAP_INVENTORY_EDIT = "inventory.edit"          # catalog: products, categories, suppliers
CAP_INVENTORY_RECEIVE = "inventory.receive"    # ENTRY movements
CAP_INVENTORY_CONSUME = "inventory.consume"    # EXIT movements
CAP_INVENTORY_ADJUST = "inventory.adjust"      # ADJUSTMENT movements (physical counts)

ALL_CAPABILITIES = {
    CAP_INVENTORY_VIEW,
    CAP_INVENTORY_EDIT,
    CAP_INVENTORY_RECEIVE,
    CAP_INVENTORY_CONSUME,
    CAP_INVENTORY_ADJUST,
}


# =========================================================
# ROLE → CAPABILITY MAP (DEFAULT)
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_RECEPTION: {
        CAP_INVENTORY_VIEW,
        CAP_INVENTORY_EDIT,
        CAP_INVENTORY_RECEIVE,
        CAP_INVENTORY_CONSUME,
        CAP_INVENTORY_ADJUST,
    },
    ROLE_VET: {
        CAP_INVENTORY_VIEW,
        CAP_INVENTORY_CONSUME,
    },
    ROLE_STUDENT: {
        CAP_INVENTORY_VIEW,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(request, user) -> set[str]:
    """
    Capabilities granted by the user's role.
    Superusers get everything regardless of role.
    """
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)

    role = get_user_role(user)
    return set(ROLE_CAPABILITIES.get(role, set()))


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_INVENTORY_ADJUST
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default to avoid accidental open endpoints
            return False

        caps = effective_capabilities_for(request, user)
        return required in caps


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from a set.

    Usage:
        view.required_any_capabilities = {CAP_INVENTORY_RECEIVE, CAP_INVENTORY_ADJUST}
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_any_capabilities", None)
        if not required:
            return False

        caps = effective_capabilities_for(request, user)
        return any(cap in caps for cap in set(required))
