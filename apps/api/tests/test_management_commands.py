"""
Management command tests: role groups, catalog seeding, price reconciliation.
"""
from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management import call_command

from apps.core.context import RoleChoices
from apps.products.models import PriceCorrection, Product


def run(command, *args):
    out = StringIO()
    call_command(command, *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
class TestCreatePosGroups:

    def test_creates_all_roles(self):
        run('create_pos_groups')

        assert set(Group.objects.values_list('name', flat=True)) == {role.value for role in RoleChoices}

    def test_idempotent(self):
        run('create_pos_groups')
        output = run('create_pos_groups')

        assert Group.objects.count() == 3
        assert '0 created, 3 existing' in output


@pytest.mark.django_db
class TestEnsureSuperuser:

    def test_creates_superuser_in_general_manager_group(self, monkeypatch):
        monkeypatch.setenv('DJANGO_SUPERUSER_PASSWORD', 'ceo-pass-123')

        run('ensure_superuser')

        user = get_user_model().objects.get(username='ceo')
        assert user.is_superuser
        assert user.groups.filter(name=RoleChoices.GENERAL_MANAGER).exists()


@pytest.mark.django_db
class TestSeedCatalog:

    def test_seeds_every_listed_sku_at_authoritative_prices(self):
        run('seed_catalog', '--initial-qty', '20')

        assert Product.objects.count() == 22
        can = Product.objects.get(sku='DUBIC-CAN')
        assert (can.retail_price, can.wholesale_price) == (12000, 11000)
        assert can.category == 'can'
        assert can.current_qty == 20

    def test_existing_products_untouched(self, dubic_can):
        Product.objects.filter(pk=dubic_can.pk).update(retail_price=9000)

        run('seed_catalog')

        dubic_can.refresh_from_db()
        assert dubic_can.retail_price == 9000
        assert dubic_can.current_qty == 100


@pytest.mark.django_db
class TestReconcilePricesCommand:

    def test_corrects_drifted_prices(self, dubic_can):
        Product.objects.filter(pk=dubic_can.pk).update(retail_price=9000, wholesale_price=8000)

        output = run('reconcile_prices')

        assert '1 product(s) corrected' in output
        dubic_can.refresh_from_db()
        assert dubic_can.retail_price == 12000
        assert PriceCorrection.objects.count() == 1

    def test_dry_run_writes_nothing(self, dubic_can):
        Product.objects.filter(pk=dubic_can.pk).update(retail_price=9000, wholesale_price=8000)

        output = run('reconcile_prices', '--dry-run')

        assert 'DUBIC-CAN: 9000/8000 -> 12000/11000' in output
        dubic_can.refresh_from_db()
        assert dubic_can.retail_price == 9000
        assert PriceCorrection.objects.count() == 0
