"""
DRF permission classes for POS RBAC.

Roles (Django groups):
- General Manager: everything, including price changes
- Admin: everything, including price changes (superusers act as Admin)
- Sales Management: record sales and add stock; read-only otherwise
"""
from rest_framework import permissions

from .context import PRICE_ADMIN_ROLES, SALES_ROLES, Actor


class _ActorRolePermission(permissions.BasePermission):
    allowed_roles = frozenset()

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return Actor.from_user(request.user).has_role(*self.allowed_roles)


class IsSalesStaff(_ActorRolePermission):
    """Any POS role: may record sales and add stock."""

    message = 'Recording sales requires a POS role (General Manager, Admin or Sales Management).'
    allowed_roles = SALES_ROLES


class IsPriceAdmin(_ActorRolePermission):
    """General Manager or Admin: may override prices and run reconciliation."""

    message = 'Changing prices requires General Manager or Admin role.'
    allowed_roles = PRICE_ADMIN_ROLES
