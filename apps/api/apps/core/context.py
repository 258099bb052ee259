"""
Actor context passed explicitly into every POS service call.

Roles are Django auth groups; superusers act as Admin.
"""
from dataclasses import dataclass

from django.db import models


class RoleChoices(models.TextChoices):
    GENERAL_MANAGER = 'General Manager', 'General Manager'
    ADMIN = 'Admin', 'Admin'
    SALES_MANAGEMENT = 'Sales Management', 'Sales Management'


# Roles allowed to change prices or run reconciliation.
PRICE_ADMIN_ROLES = frozenset({RoleChoices.GENERAL_MANAGER, RoleChoices.ADMIN})

# Roles allowed to record sales and add stock.
SALES_ROLES = frozenset({
    RoleChoices.GENERAL_MANAGER,
    RoleChoices.ADMIN,
    RoleChoices.SALES_MANAGEMENT,
})

# Role precedence when a user belongs to several groups.
_ROLE_PRECEDENCE = [
    RoleChoices.GENERAL_MANAGER,
    RoleChoices.ADMIN,
    RoleChoices.SALES_MANAGEMENT,
]


@dataclass(frozen=True)
class Actor:
    """Authenticated caller: identifier plus role."""

    actor_id: str
    role: str = ''

    @classmethod
    def from_user(cls, user):
        if user.is_superuser:
            return cls(actor_id=str(user.pk), role=RoleChoices.ADMIN.value)

        groups = set(user.groups.values_list('name', flat=True))
        role = next((r.value for r in _ROLE_PRECEDENCE if r in groups), '')
        return cls(actor_id=str(user.pk), role=role)

    @classmethod
    def system(cls):
        """Actor used by automated jobs such as price reconciliation."""
        return cls(actor_id='system', role=RoleChoices.ADMIN.value)

    def has_role(self, *roles):
        return self.role in roles
