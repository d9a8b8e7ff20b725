# permissions/roles.py

from __future__ import annotations

from rest_framework.permissions import BasePermission

from shops.models import ShopMembership
from shops.scope import resolve_shop_scope

# =========================================================
# ROLE CONSTANTS (PER-SHOP MEMBERSHIP ROLES)
# =========================================================
ROLE_OWNER = ShopMembership.Role.OWNER
ROLE_MANAGER = ShopMembership.Role.MANAGER
ROLE_STAFF = ShopMembership.Role.STAFF


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_INVENTORY_VIEW = "inventory.view"
CAP_INVENTORY_EDIT = "inventory.edit"  # create / update / delete / bulk import items
CAP_INVENTORY_ADJUST = "inventory.adjust"  # manual stock adjustments

CAP_PURCHASES_VIEW = "purchases.view"
CAP_PURCHASES_CREATE = "purchases.create"
CAP_SUPPLIERS_VIEW = "suppliers.view"
CAP_SUPPLIERS_MANAGE = "suppliers.manage"

CAP_SALES_VIEW = "sales.view"
CAP_SALES_CREATE = "sales.create"
CAP_CUSTOMERS_VIEW = "customers.view"
CAP_CUSTOMERS_MANAGE = "customers.manage"

ALL_CAPABILITIES = {
    CAP_INVENTORY_VIEW,
    CAP_INVENTORY_EDIT,
    CAP_INVENTORY_ADJUST,
    CAP_PURCHASES_VIEW,
    CAP_PURCHASES_CREATE,
    CAP_SUPPLIERS_VIEW,
    CAP_SUPPLIERS_MANAGE,
    CAP_SALES_VIEW,
    CAP_SALES_CREATE,
    CAP_CUSTOMERS_VIEW,
    CAP_CUSTOMERS_MANAGE,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_OWNER: {
        *ALL_CAPABILITIES,
    },
    ROLE_MANAGER: {
        *ALL_CAPABILITIES,
    },
    # cashier: reads stock and rings up sales; sales history and
    # customer records stay with OWNER / MANAGER
    ROLE_STAFF: {
        CAP_INVENTORY_VIEW,
        CAP_SUPPLIERS_VIEW,
        CAP_SALES_CREATE,
    },
}


# =========================================================
# Helpers
# =========================================================
def capabilities_for_role(role) -> set[str]:
    return set(ROLE_CAPABILITIES.get(role, set()))


def required_capability_for(request, view):
    """
    view.required_capability is either a single capability or a
    {HTTP_METHOD: capability} map for views that serve several verbs.
    """
    required = getattr(view, "required_capability", None)
    if isinstance(required, dict):
        return required.get(request.method)
    return required


# =========================================================
# Capability Permission
# =========================================================
class HasCapability(BasePermission):
    """
    Resolve the shop scope (X-Shop-Id ↔ membership), then require the
    view's capability for the caller's role in that shop.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        required_capability = CAP_INVENTORY_ADJUST
        # or
        required_capability = {"GET": CAP_SALES_VIEW, "POST": CAP_SALES_CREATE}
    """

    message = "Insufficient permissions for this shop"

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = required_capability_for(request, view)
        if not required:
            # deny-by-default to avoid accidental open endpoints
            return False

        membership = resolve_shop_scope(request)
        return required in capabilities_for_role(membership.role)
