"""
Inventory store - the only place POS services touch the ORM for writes.

Services receive a store by constructor injection. DjangoInventoryStore
is the production implementation; tests subclass it to inject failures
or interleave concurrent writers.

Every write runs in its own savepoint and raw DatabaseError is wrapped in
PersistenceError, so a failed write leaves the connection usable and the
caller sees only the POS error taxonomy.
"""
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.core.errors import NotFoundError, PersistenceError
from apps.core.observability import get_sanitized_logger
from apps.products.models import PriceCorrection, Product
from apps.sales.models import PaymentStatusChoices, Sale

from .models import StockChange

logger = get_sanitized_logger(__name__)


@dataclass(frozen=True)
class CustomerInfo:
    """Optional customer details attached to a sale."""
    name: str = ''
    phone: str = ''
    customer_type: str = ''


@dataclass(frozen=True)
class PaymentInfo:
    """
    Payment details for a sale.

    amount_paid defaults to the sale total; amount_owing defaults to the
    unpaid remainder.
    """
    status: str = PaymentStatusChoices.PAID
    amount_paid: Optional[int] = None
    amount_owing: Optional[int] = None


@dataclass(frozen=True)
class SaleDraft:
    product_id: object
    product_name: str
    quantity: int
    unit_price: int
    total_amount: int
    sale_type: str
    sold_by: str
    sold_by_role: str = ''
    customer: Optional[CustomerInfo] = None
    payment: Optional[PaymentInfo] = None


@dataclass(frozen=True)
class StockChangeDraft:
    product_id: object
    product_name: str
    change_type: str
    quantity: int
    previous_qty: int
    new_qty: int
    changed_by: str
    reason: str = ''
    sale_id: object = None


@dataclass(frozen=True)
class PriceCorrectionDraft:
    product_id: object
    sku: str
    old_retail: int
    new_retail: int
    old_wholesale: int
    new_wholesale: int
    reason: str = ''


class DjangoInventoryStore:
    """Inventory store backed by the Django ORM."""

    supports_transactions = True

    def __init__(self, using=None):
        self.using = using

    def atomic(self):
        return transaction.atomic(using=self.using)

    @contextmanager
    def _guard(self, operation):
        try:
            with transaction.atomic(using=self.using):
                yield
        except DatabaseError as e:
            logger.error(
                f'Inventory store {operation} failed',
                extra={'event': 'store_write_failed', 'operation': operation, 'error': str(e)}
            )
            raise PersistenceError(f'{operation} failed: {e}') from e

    def _products(self):
        return Product.objects.using(self.using) if self.using else Product.objects.all()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_product(self, product_id) -> Optional[Product]:
        try:
            return self._products().get(pk=product_id)
        except (Product.DoesNotExist, ValidationError, ValueError):
            return None
        except DatabaseError as e:
            raise PersistenceError(f'find_product failed: {e}') from e

    def find_product_by_sku(self, sku) -> Optional[Product]:
        try:
            return self._products().get(sku=sku)
        except Product.DoesNotExist:
            return None
        except DatabaseError as e:
            raise PersistenceError(f'find_product_by_sku failed: {e}') from e

    def list_products(self, active_only=False) -> List[Product]:
        queryset = self._products().order_by('name')
        if active_only:
            queryset = queryset.filter(is_active=True)
        try:
            return list(queryset)
        except DatabaseError as e:
            raise PersistenceError(f'list_products failed: {e}') from e

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update_product_quantity(self, product_id, new_quantity, expected_previous_quantity=None) -> bool:
        """
        Set a product's quantity.

        With expected_previous_quantity the update only applies while the
        stored quantity still equals it (compare-and-set). Returns False
        when no row matched.
        """
        if new_quantity < 0:
            raise ValueError('new_quantity cannot be negative')

        with self._guard('update_product_quantity'):
            queryset = self._products().filter(pk=product_id)
            if expected_previous_quantity is not None:
                queryset = queryset.filter(current_qty=expected_previous_quantity)
            updated = queryset.update(current_qty=new_quantity, updated_at=timezone.now())
        return updated == 1

    def update_product_prices(self, product_id, retail, wholesale):
        with self._guard('update_product_prices'):
            updated = self._products().filter(pk=product_id).update(
                retail_price=retail,
                wholesale_price=wholesale,
                updated_at=timezone.now(),
            )
        if updated == 0:
            raise NotFoundError(f'Product {product_id} not found')

    def insert_sale(self, draft: SaleDraft) -> Sale:
        customer = draft.customer or CustomerInfo()
        payment = draft.payment or PaymentInfo()
        amount_paid = draft.total_amount if payment.amount_paid is None else payment.amount_paid
        if payment.amount_owing is None:
            amount_owing = max(draft.total_amount - amount_paid, 0)
        else:
            amount_owing = payment.amount_owing

        with self._guard('insert_sale'):
            sale = Sale(
                product_id=draft.product_id,
                product_name=draft.product_name,
                quantity=draft.quantity,
                unit_price=draft.unit_price,
                total_amount=draft.total_amount,
                sale_type=draft.sale_type,
                customer_name=customer.name,
                customer_phone=customer.phone,
                customer_type=customer.customer_type,
                payment_status=payment.status,
                amount_paid=amount_paid,
                amount_owing=amount_owing,
                sold_by=draft.sold_by,
                sold_by_role=draft.sold_by_role,
            )
            sale.save(using=self.using)
        return sale

    def insert_stock_change(self, draft: StockChangeDraft) -> StockChange:
        with self._guard('insert_stock_change'):
            change = StockChange(
                product_id=draft.product_id,
                product_name=draft.product_name,
                change_type=draft.change_type,
                quantity=draft.quantity,
                previous_qty=draft.previous_qty,
                new_qty=draft.new_qty,
                changed_by=draft.changed_by,
                reason=draft.reason,
                sale_id=draft.sale_id,
            )
            change.save(using=self.using)
        return change

    def insert_price_correction(self, draft: PriceCorrectionDraft) -> PriceCorrection:
        with self._guard('insert_price_correction'):
            correction = PriceCorrection(
                product_id=draft.product_id,
                sku=draft.sku,
                old_retail=draft.old_retail,
                new_retail=draft.new_retail,
                old_wholesale=draft.old_wholesale,
                new_wholesale=draft.new_wholesale,
                reason=draft.reason,
            )
            correction.save(using=self.using)
        return correction
