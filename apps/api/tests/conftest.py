"""
Global test fixtures for pytest.

Provides reusable fixtures for POS testing:
- Users and authenticated API clients by role
- Actors for calling services directly
- Catalog products (listed and unlisted SKUs)
"""
import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from apps.core.context import Actor, RoleChoices
from apps.products.models import Product, ProductCategoryChoices

User = get_user_model()


# ============================================================================
# Users & API Clients
# ============================================================================

def _create_user(username, role=None, **extra):
    user = User.objects.create_user(username=username, password='testpass123', **extra)
    if role:
        group, _ = Group.objects.get_or_create(name=role)
        user.groups.add(group)
    return user


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    return APIClient()


@pytest.fixture
def manager_user(db):
    return _create_user('manager', RoleChoices.GENERAL_MANAGER)


@pytest.fixture
def admin_user(db):
    return _create_user('admin', RoleChoices.ADMIN)


@pytest.fixture
def sales_user(db):
    return _create_user('cashier', RoleChoices.SALES_MANAGEMENT)


@pytest.fixture
def no_role_user(db):
    """Authenticated user with no POS group."""
    return _create_user('visitor')


@pytest.fixture
def manager_client(manager_user):
    return _client_for(manager_user)


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def sales_client(sales_user):
    return _client_for(sales_user)


@pytest.fixture
def no_role_client(no_role_user):
    return _client_for(no_role_user)


# ============================================================================
# Actors
# ============================================================================

@pytest.fixture
def sales_actor():
    return Actor(actor_id='cashier-1', role=RoleChoices.SALES_MANAGEMENT.value)


@pytest.fixture
def manager_actor():
    return Actor(actor_id='manager-1', role=RoleChoices.GENERAL_MANAGER.value)


# ============================================================================
# Products
# ============================================================================

@pytest.fixture
def dubic_can(db):
    """Listed SKU: can, 12000 retail / 11000 wholesale, wholesale from 30."""
    return Product.objects.create(
        sku='DUBIC-CAN',
        name='Dubic Can',
        category=ProductCategoryChoices.CAN,
        retail_price=12000,
        wholesale_price=11000,
        current_qty=100,
    )


@pytest.fixture
def pepsi_rgb(db):
    """Listed SKU: glass bottle, 4500 retail / 4400 wholesale, wholesale from 24."""
    return Product.objects.create(
        sku='PEPSI-RGB',
        name='Pepsi RGB',
        category=ProductCategoryChoices.GLASS_BOTTLE,
        retail_price=4500,
        wholesale_price=4400,
        current_qty=50,
    )


@pytest.fixture
def local_juice(db):
    """Unlisted SKU: stored prices are authoritative."""
    return Product.objects.create(
        sku='LOCAL-ZOBO',
        name='Zobo Drink',
        category=ProductCategoryChoices.STANDARD,
        retail_price=1500,
        wholesale_price=1200,
        current_qty=40,
    )
