"""
Stock service tests: stock additions and price overrides.

Test coverage:
1. add_stock increments quantity and writes an ADD_STOCK ledger entry
2. add_stock retries a stale snapshot and gives up when it never settles
3. override_prices validates, updates and writes a PRICE_OVERRIDE entry
4. Listed SKUs cannot be overridden
5. Ledger entries are append-only
"""
import uuid

import pytest
from django.core.exceptions import ValidationError

from apps.core.context import Actor
from apps.core.errors import ConfigurationError, ConflictError, NotFoundError
from apps.stock.models import StockChange, StockChangeTypeChoices
from apps.stock.services import StockAdjustment, add_stock, override_prices
from apps.stock.storage import DjangoInventoryStore


# ============================================================================
# Fixtures
# ============================================================================

class BumpOnceStore(DjangoInventoryStore):
    """Another writer adds 5 units right after our first read."""

    def __init__(self):
        super().__init__()
        self.bumped = False

    def find_product(self, product_id):
        product = super().find_product(product_id)
        if not self.bumped:
            self.bumped = True
            add_stock(product_id, 5, _other_actor())
        return product


class NeverSettlesStore(DjangoInventoryStore):
    def update_product_quantity(self, product_id, new_quantity, expected_previous_quantity=None):
        return False


def _other_actor():
    return Actor(actor_id='storekeeper', role='Sales Management')


# ============================================================================
# add_stock
# ============================================================================

@pytest.mark.django_db
class TestAddStock:

    def test_adds_quantity_and_returns_adjustment(self, pepsi_rgb, sales_actor):
        adjustment = add_stock(pepsi_rgb.id, 48, sales_actor)

        assert isinstance(adjustment, StockAdjustment)
        assert (adjustment.previous_qty, adjustment.new_qty) == (50, 98)
        pepsi_rgb.refresh_from_db()
        assert pepsi_rgb.current_qty == 98

    def test_writes_add_stock_ledger_entry(self, pepsi_rgb, sales_actor):
        add_stock(pepsi_rgb.id, 48, sales_actor, reason='Delivery from depot')

        change = StockChange.objects.get(product=pepsi_rgb)
        assert change.change_type == StockChangeTypeChoices.ADD_STOCK
        assert change.quantity == 48
        assert (change.previous_qty, change.new_qty) == (50, 98)
        assert change.reason == 'Delivery from depot'
        assert change.changed_by == sales_actor.actor_id
        assert change.sale is None

    def test_default_reason(self, pepsi_rgb, sales_actor):
        adjustment = add_stock(pepsi_rgb.id, 1, sales_actor)

        assert adjustment.change.reason == 'Stock addition'

    @pytest.mark.parametrize('quantity', [0, -3])
    def test_rejects_non_positive_quantity(self, pepsi_rgb, sales_actor, quantity):
        with pytest.raises(ValueError):
            add_stock(pepsi_rgb.id, quantity, sales_actor)

        assert StockChange.objects.count() == 0

    def test_unknown_product(self, sales_actor):
        with pytest.raises(NotFoundError):
            add_stock(uuid.uuid4(), 5, sales_actor)

    def test_retries_after_concurrent_addition(self, pepsi_rgb, sales_actor):
        """
        GIVEN another writer adds 5 units between our read and write
        WHEN we add 10
        THEN both additions land: 50 -> 55 -> 65
        """
        adjustment = add_stock(pepsi_rgb.id, 10, sales_actor, store=BumpOnceStore())

        assert (adjustment.previous_qty, adjustment.new_qty) == (55, 65)
        pepsi_rgb.refresh_from_db()
        assert pepsi_rgb.current_qty == 65
        assert StockChange.objects.filter(product=pepsi_rgb).count() == 2

    def test_gives_up_when_stock_never_settles(self, pepsi_rgb, sales_actor):
        with pytest.raises(ConflictError):
            add_stock(pepsi_rgb.id, 10, sales_actor, store=NeverSettlesStore(), max_attempts=2)

        assert StockChange.objects.count() == 0


# ============================================================================
# override_prices
# ============================================================================

@pytest.mark.django_db
class TestOverridePrices:

    def test_updates_unlisted_product_prices(self, local_juice, manager_actor):
        change = override_prices(local_juice.id, 1800, 1600, manager_actor, reason='New supplier price')

        local_juice.refresh_from_db()
        assert (local_juice.retail_price, local_juice.wholesale_price) == (1800, 1600)
        assert change.change_type == StockChangeTypeChoices.PRICE_OVERRIDE
        assert change.quantity == 0
        assert change.previous_qty == change.new_qty == 40
        assert change.reason == 'New supplier price: retail 1500 -> 1800, wholesale 1200 -> 1600'

    def test_wholesale_above_retail_rejected(self, local_juice, manager_actor):
        with pytest.raises(ConfigurationError):
            override_prices(local_juice.id, 1000, 1100, manager_actor)

        local_juice.refresh_from_db()
        assert local_juice.retail_price == 1500
        assert StockChange.objects.count() == 0

    def test_listed_sku_cannot_be_overridden(self, dubic_can, manager_actor):
        with pytest.raises(ConfigurationError):
            override_prices(dubic_can.id, 13000, 12000, manager_actor)

        dubic_can.refresh_from_db()
        assert dubic_can.retail_price == 12000

    def test_non_positive_price_rejected(self, local_juice, manager_actor):
        with pytest.raises(ValueError):
            override_prices(local_juice.id, 0, 0, manager_actor)

    def test_unknown_product(self, manager_actor):
        with pytest.raises(NotFoundError):
            override_prices(uuid.uuid4(), 100, 90, manager_actor)


@pytest.mark.django_db
class TestLedgerAppendOnly:

    def test_stock_change_cannot_be_modified(self, pepsi_rgb, sales_actor):
        change = add_stock(pepsi_rgb.id, 5, sales_actor).change
        change.quantity = 500

        with pytest.raises(ValidationError):
            change.save()

    def test_stock_change_cannot_be_deleted(self, pepsi_rgb, sales_actor):
        change = add_stock(pepsi_rgb.id, 5, sales_actor).change

        with pytest.raises(ValidationError):
            change.delete()
        assert StockChange.objects.filter(pk=change.pk).exists()
