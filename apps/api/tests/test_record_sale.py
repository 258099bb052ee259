"""
Sale transaction tests.

Test coverage:
1. Totals are unit_price x quantity exactly (DUBIC-CAN, PEPSI-RGB examples)
2. Successful sale deducts stock and appends exactly one SALE_DEDUCT entry
7. Customer and payment details are recorded; overpayment and bad quantities are rejected
4. Sales use authoritative prices even when stored prices drifted
5. Inconsistent stored prices on an unlisted SKU: ConfigurationError, nothing written
6. Storage failures: rollback on transactional store, PartialFailureError otherwise
7. Customer and payment details are recorded
"""
import uuid

import pytest
from django.core.exceptions import ValidationError

from apps.core.errors import (
    ConfigurationError,
    InsufficientStockError,
    InvalidInputError,
    NotFoundError,
    PartialFailureError,
    PersistenceError,
)
from apps.products.models import Product
from apps.sales.models import PaymentStatusChoices, Sale, SaleTypeChoices
from apps.sales.services import SaleTransactionExecutor, record_sale
from apps.stock.models import StockChange, StockChangeTypeChoices
from apps.stock.storage import CustomerInfo, DjangoInventoryStore, PaymentInfo


# ============================================================================
# Fixtures
# ============================================================================

class FailingQuantityStore(DjangoInventoryStore):
    """Store whose stock update always fails."""

    def update_product_quantity(self, product_id, new_quantity, expected_previous_quantity=None):
        raise PersistenceError('disk full')


class NonTransactionalFailingStore(FailingQuantityStore):
    """Store without transactions whose stock update fails."""

    supports_transactions = False


class FailingSaleInsertStore(DjangoInventoryStore):
    def insert_sale(self, draft):
        raise PersistenceError('insert rejected')


class FailingLedgerStore(DjangoInventoryStore):
    supports_transactions = False

    def insert_stock_change(self, draft):
        raise PersistenceError('ledger unavailable')


def executor_for(store):
    return SaleTransactionExecutor.from_settings(store=store)


# ============================================================================
# Totals and tiers
# ============================================================================

@pytest.mark.django_db
class TestSaleTotals:

    def test_dubic_can_30_units_wholesale(self, dubic_can, sales_actor):
        outcome = record_sale(dubic_can.id, 30, sales_actor)

        assert outcome.ok
        sale = outcome.result.sale
        assert sale.unit_price == 11000
        assert sale.total_amount == 330000
        assert sale.sale_type == SaleTypeChoices.WHOLESALE
        assert outcome.result.price_info.is_wholesale is True

    def test_dubic_can_29_units_retail(self, dubic_can, sales_actor):
        outcome = record_sale(dubic_can.id, 29, sales_actor)

        assert outcome.ok
        assert outcome.result.sale.unit_price == 12000
        assert outcome.result.sale.total_amount == 348000
        assert outcome.result.sale.sale_type == SaleTypeChoices.RETAIL

    def test_pepsi_24_units_wholesale(self, pepsi_rgb, sales_actor):
        outcome = record_sale(pepsi_rgb.id, 24, sales_actor)

        assert outcome.result.sale.total_amount == 105600
        assert outcome.result.sale.sale_type == SaleTypeChoices.WHOLESALE

    def test_pepsi_23_units_retail(self, pepsi_rgb, sales_actor):
        outcome = record_sale(pepsi_rgb.id, 23, sales_actor)

        assert outcome.result.sale.total_amount == 103500
        assert outcome.result.sale.sale_type == SaleTypeChoices.RETAIL

    def test_price_info_matches_stored_sale(self, dubic_can, sales_actor):
        """
        GIVEN a successful sale
        WHEN comparing the returned price info with the stored record
        THEN the total is identical (computed once, never doubled)
        """
        outcome = record_sale(dubic_can.id, 5, sales_actor)

        stored = Sale.objects.get(pk=outcome.result.sale.pk)
        info = outcome.result.price_info
        assert stored.total_amount == info.total_amount == info.unit_price * info.quantity == 60000
        assert info.product_name == 'Dubic Can'


# ============================================================================
# Stock deduction and ledger
# ============================================================================

@pytest.mark.django_db
class TestStockDeduction:

    def test_successful_sale_deducts_stock(self, dubic_can, sales_actor):
        record_sale(dubic_can.id, 30, sales_actor)

        dubic_can.refresh_from_db()
        assert dubic_can.current_qty == 70

    def test_successful_sale_appends_one_ledger_entry(self, dubic_can, sales_actor):
        outcome = record_sale(dubic_can.id, 30, sales_actor)
        sale = outcome.result.sale

        changes = StockChange.objects.filter(sale=sale)
        assert changes.count() == 1

        change = changes.get()
        assert change.change_type == StockChangeTypeChoices.SALE_DEDUCT
        assert change.quantity == -30
        assert change.previous_qty == 100
        assert change.new_qty == 70
        assert change.previous_qty - change.new_qty == sale.quantity
        assert change.changed_by == sales_actor.actor_id
        assert change.reason == 'Sale: 30 units @ 11000'

    def test_sale_records_actor(self, dubic_can, sales_actor):
        sale = record_sale(dubic_can.id, 1, sales_actor).result.sale

        assert sale.sold_by == 'cashier-1'
        assert sale.sold_by_role == 'Sales Management'

    def test_selling_entire_stock_leaves_zero(self, pepsi_rgb, sales_actor):
        outcome = record_sale(pepsi_rgb.id, 50, sales_actor)

        assert outcome.ok
        pepsi_rgb.refresh_from_db()
        assert pepsi_rgb.current_qty == 0


# ============================================================================
# Pre-write failures
# ============================================================================

@pytest.mark.django_db
class TestRejectedSales:

    def test_insufficient_stock_writes_nothing(self, pepsi_rgb, sales_actor):
        outcome = record_sale(pepsi_rgb.id, 51, sales_actor)

        assert not outcome.ok
        assert isinstance(outcome.error, InsufficientStockError)
        assert outcome.error.available == 50
        assert outcome.error.requested == 51
        assert Sale.objects.count() == 0
        assert StockChange.objects.count() == 0
        pepsi_rgb.refresh_from_db()
        assert pepsi_rgb.current_qty == 50

    def test_unknown_product_is_not_found(self, sales_actor):
        outcome = record_sale(uuid.uuid4(), 1, sales_actor)

        assert isinstance(outcome.error, NotFoundError)
        assert outcome.error.to_dict()['error_type'] == 'not_found'
        assert Sale.objects.count() == 0

    def test_malformed_product_id_is_not_found(self, sales_actor):
        outcome = record_sale('not-a-uuid', 1, sales_actor)

        assert isinstance(outcome.error, NotFoundError)

    def test_executor_raises_typed_errors(self, pepsi_rgb, sales_actor):
        executor = executor_for(DjangoInventoryStore())

        with pytest.raises(InsufficientStockError):
            executor.execute(pepsi_rgb.id, 500, sales_actor)

    def test_executor_rejects_non_positive_quantity(self, pepsi_rgb, sales_actor):
        executor = executor_for(DjangoInventoryStore())

        with pytest.raises(InvalidInputError):
            executor.execute(pepsi_rgb.id, 0, sales_actor)

    @pytest.mark.parametrize('quantity', [0, -4, 1.5])
    def test_bad_quantity_returned_as_outcome(self, pepsi_rgb, sales_actor, quantity):
        outcome = record_sale(pepsi_rgb.id, quantity, sales_actor)

        assert not outcome.ok
        assert isinstance(outcome.error, InvalidInputError)
        assert outcome.error.http_status == 400
        assert Sale.objects.count() == 0

    def test_inconsistent_unlisted_prices_raise_configuration_error(self, sales_actor):
        """
        GIVEN an unlisted product whose stored wholesale exceeds retail
        WHEN a sale is attempted
        THEN ConfigurationError is returned and nothing is written
        """
        product = Product.objects.create(
            sku='BAD-PRICES', name='Bad Prices', retail_price=1000, wholesale_price=1500, current_qty=10
        )

        outcome = record_sale(product.id, 1, sales_actor)

        assert isinstance(outcome.error, ConfigurationError)
        assert Sale.objects.count() == 0
        product.refresh_from_db()
        assert product.current_qty == 10


# ============================================================================
# Authoritative prices
# ============================================================================

@pytest.mark.django_db
class TestAuthoritativePricing:

    def test_sale_uses_authoritative_price_over_stale_stored_price(self, sales_actor):
        """
        GIVEN a listed SKU whose stored prices drifted far from the list
        WHEN a sale is recorded
        THEN the authoritative price is charged and the stored row keeps its stock semantics
        """
        product = Product.objects.create(
            sku='DUBIC-CAN', name='Dubic Can', category='can',
            retail_price=9000, wholesale_price=8000, current_qty=40,
        )

        outcome = record_sale(product.id, 30, sales_actor)

        assert outcome.result.sale.unit_price == 11000
        assert outcome.result.sale.total_amount == 330000

    def test_unlisted_sku_uses_stored_prices(self, local_juice, sales_actor):
        outcome = record_sale(local_juice.id, 2, sales_actor)

        assert outcome.result.sale.unit_price == 1500
        assert outcome.result.sale.total_amount == 3000


# ============================================================================
# Storage failures
# ============================================================================

@pytest.mark.django_db
class TestStorageFailures:

    def test_transactional_failure_rolls_back_sale(self, dubic_can, sales_actor):
        outcome = record_sale(dubic_can.id, 5, sales_actor, executor=executor_for(FailingQuantityStore()))

        assert isinstance(outcome.error, PersistenceError)
        assert Sale.objects.count() == 0
        assert StockChange.objects.count() == 0
        dubic_can.refresh_from_db()
        assert dubic_can.current_qty == 100

    def test_failed_sale_insert_leaves_stock_untouched(self, dubic_can, sales_actor):
        outcome = record_sale(dubic_can.id, 5, sales_actor, executor=executor_for(FailingSaleInsertStore()))

        assert isinstance(outcome.error, PersistenceError)
        dubic_can.refresh_from_db()
        assert dubic_can.current_qty == 100

    def test_non_transactional_stock_failure_is_partial_failure(self, dubic_can, sales_actor):
        """
        GIVEN a store without transactions
        WHEN the stock update fails after the sale was written
        THEN PartialFailureError carries the recorded sale and stock is unchanged
        """
        executor = executor_for(NonTransactionalFailingStore())

        with pytest.raises(PartialFailureError) as exc_info:
            executor.execute(dubic_can.id, 5, sales_actor)

        error = exc_info.value
        assert Sale.objects.filter(pk=error.sale.pk).exists()
        assert isinstance(error.cause, PersistenceError)
        assert error.details()['sale_id'] == str(error.sale.pk)
        assert error.details()['cause_type'] == 'persistence'
        dubic_can.refresh_from_db()
        assert dubic_can.current_qty == 100

    def test_non_transactional_ledger_failure_is_partial_failure(self, dubic_can, sales_actor):
        outcome = record_sale(dubic_can.id, 5, sales_actor, executor=executor_for(FailingLedgerStore()))

        assert isinstance(outcome.error, PartialFailureError)
        assert outcome.error.http_status == 500
        assert Sale.objects.count() == 1
        assert StockChange.objects.count() == 0


# ============================================================================
# Customer & payment
# ============================================================================

@pytest.mark.django_db
class TestCustomerAndPayment:

    def test_defaults_to_fully_paid(self, dubic_can, sales_actor):
        sale = record_sale(dubic_can.id, 2, sales_actor).result.sale

        assert sale.payment_status == PaymentStatusChoices.PAID
        assert sale.amount_paid == 24000
        assert sale.amount_owing == 0

    def test_partial_payment_computes_owing(self, dubic_can, sales_actor):
        sale = record_sale(
            dubic_can.id, 2, sales_actor,
            customer=CustomerInfo(name='Mama Tunde', phone='08030000000', customer_type='retail'),
            payment=PaymentInfo(status=PaymentStatusChoices.PARTIAL, amount_paid=10000),
        ).result.sale

        assert sale.customer_name == 'Mama Tunde'
        assert sale.customer_phone == '08030000000'
        assert sale.amount_paid == 10000
        assert sale.amount_owing == 14000

    def test_overpayment_is_rejected_before_writing(self, dubic_can, sales_actor):
        outcome = record_sale(
            dubic_can.id, 1, sales_actor,
            payment=PaymentInfo(
                status=PaymentStatusChoices.OWING, amount_paid=10_000_000, amount_owing=5_000_000,
            ),
        )

        assert isinstance(outcome.error, InvalidInputError)
        assert Sale.objects.count() == 0
        assert StockChange.objects.count() == 0
        dubic_can.refresh_from_db()
        assert dubic_can.current_qty == 100

    def test_paid_above_total_without_owing_is_rejected(self, dubic_can, sales_actor):
        outcome = record_sale(
            dubic_can.id, 1, sales_actor,
            payment=PaymentInfo(status=PaymentStatusChoices.PAID, amount_paid=12001),
        )

        assert isinstance(outcome.error, InvalidInputError)


# ============================================================================
# Immutability
# ============================================================================

@pytest.mark.django_db
class TestSaleImmutability:

    def test_sale_cannot_be_updated(self, dubic_can, sales_actor):
        sale = record_sale(dubic_can.id, 1, sales_actor).result.sale
        sale.unit_price = 1

        with pytest.raises(ValidationError):
            sale.save()

    def test_sale_cannot_be_deleted(self, dubic_can, sales_actor):
        sale = record_sale(dubic_can.id, 1, sales_actor).result.sale

        with pytest.raises(ValidationError):
            sale.delete()
        assert Sale.objects.filter(pk=sale.pk).exists()
