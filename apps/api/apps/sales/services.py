"""
Sales service layer - Business logic for recording a sale.

One sale = one product, one quantity. Recording it:
- prices the product from the authoritative catalog (never a stale cache)
- computes the total exactly once
- writes the sale, the stock deduction and the ledger entry together
- retries the whole sequence when a concurrent writer changed the stock
"""
import time
from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from apps.core.errors import (
    ConflictError,
    InsufficientStockError,
    InvalidInputError,
    NotFoundError,
    PartialFailureError,
    POSError,
)
from apps.core.observability import get_sanitized_logger, metrics
from apps.core.observability.events import (
    log_consistency_checkpoint,
    log_sale_failed,
    log_sale_recorded,
    log_stock_change,
)
from apps.core.observability.tracing import add_span_attribute, trace_span
from apps.products.catalog import PriceCatalog
from apps.stock.models import StockChangeTypeChoices
from apps.stock.storage import (
    CustomerInfo,
    DjangoInventoryStore,
    PaymentInfo,
    SaleDraft,
    StockChangeDraft,
)

from .models import Sale, SaleTypeChoices
from .pricing import PricingResolver

logger = get_sanitized_logger(__name__)


@dataclass(frozen=True)
class PriceInfo:
    """Pricing actually charged for a recorded sale."""
    unit_price: int
    total_amount: int
    is_wholesale: bool
    quantity: int
    product_name: str

    def to_dict(self):
        return {
            'unit_price': self.unit_price,
            'total_amount': self.total_amount,
            'is_wholesale': self.is_wholesale,
            'sale_type': SaleTypeChoices.WHOLESALE.value if self.is_wholesale else SaleTypeChoices.RETAIL.value,
            'quantity': self.quantity,
            'product_name': self.product_name,
        }


@dataclass(frozen=True)
class SaleResult:
    sale: Sale
    price_info: PriceInfo


@dataclass(frozen=True)
class SaleOutcome:
    """
    Result of record_sale(): exactly one of result / error is set.

    UI glue renders error.message (and error.to_dict() for APIs) instead
    of catching exceptions.
    """
    result: Optional[SaleResult] = None
    error: Optional[POSError] = None
    attempts: int = 1

    @property
    def ok(self):
        return self.error is None


def _check_payment(payment, total_amount):
    """Paid plus owing may not exceed the server-computed total."""
    if payment is None:
        return

    amount_paid = total_amount if payment.amount_paid is None else payment.amount_paid
    if payment.amount_owing is None:
        amount_owing = max(total_amount - amount_paid, 0)
    else:
        amount_owing = payment.amount_owing

    if amount_paid < 0 or amount_owing < 0:
        raise InvalidInputError('Payment amounts cannot be negative')
    if amount_paid + amount_owing > total_amount:
        raise InvalidInputError(
            f'Amount paid ({amount_paid}) plus amount owing ({amount_owing}) '
            f'exceeds the sale total ({total_amount})'
        )


class SaleTransactionExecutor:
    """
    Record one sale against one product.

    Collaborators are injected:
        store: inventory store (DjangoInventoryStore in production)
        catalog: PriceCatalog overlaying authoritative prices
        resolver: PricingResolver choosing retail vs wholesale
    """

    def __init__(self, store, catalog, resolver):
        self.store = store
        self.catalog = catalog
        self.resolver = resolver

    @classmethod
    def from_settings(cls, store=None):
        store = store or DjangoInventoryStore()
        return cls(
            store=store,
            catalog=PriceCatalog.from_settings(store=store),
            resolver=PricingResolver.from_settings(),
        )

    def execute(self, product_id, quantity, actor, customer: Optional[CustomerInfo] = None,
                payment: Optional[PaymentInfo] = None) -> SaleResult:
        """
        Fetch, price and persist a sale.

        Raises:
            InvalidInputError: quantity is not a positive integer, or the
                payment amounts exceed the sale total
            NotFoundError: no such product
            InsufficientStockError: quantity exceeds stock on hand
            ConfigurationError: product prices are inconsistent
            PersistenceError: the sale could not be written (nothing changed)
            ConflictError: stock changed since it was read (nothing changed)
            PartialFailureError: non-transactional store only; sale written,
                stock deduction or ledger entry not
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidInputError(f'quantity must be a positive integer, got {quantity!r}')

        stored = self.store.find_product(product_id)
        if stored is None:
            raise NotFoundError(f'Product {product_id} not found')

        product = self.catalog.apply(stored)
        previous_qty = product.current_qty

        if quantity > previous_qty:
            raise InsufficientStockError(
                available=previous_qty,
                requested=quantity,
                product_name=product.name,
            )

        quote = self.resolver.resolve(product, quantity)
        total_amount = quote.unit_price * quantity
        sale_type = SaleTypeChoices.WHOLESALE if quote.is_wholesale else SaleTypeChoices.RETAIL
        _check_payment(payment, total_amount)

        draft = SaleDraft(
            product_id=product.pk,
            product_name=product.name,
            quantity=quantity,
            unit_price=quote.unit_price,
            total_amount=total_amount,
            sale_type=sale_type.value,
            sold_by=actor.actor_id,
            sold_by_role=actor.role,
            customer=customer,
            payment=payment,
        )

        if self.store.supports_transactions:
            with self.store.atomic():
                sale = self.store.insert_sale(draft)
                change = self._deduct_stock(sale, product, previous_qty, actor)
        else:
            sale = self.store.insert_sale(draft)
            try:
                change = self._deduct_stock(sale, product, previous_qty, actor)
            except POSError as e:
                raise PartialFailureError(sale, e) from e

        metrics.stock_changes_total.labels(change_type=change.change_type).inc()
        log_stock_change(change)
        log_consistency_checkpoint(
            'sale_stock_deducted',
            entity_ids={'sale_id': str(sale.id), 'product_id': str(product.pk)},
            checks_passed={
                'quantity_matches': change.previous_qty - change.new_qty == sale.quantity,
                'total_matches': sale.total_amount == sale.unit_price * sale.quantity,
            },
        )

        return SaleResult(
            sale=sale,
            price_info=PriceInfo(
                unit_price=quote.unit_price,
                total_amount=total_amount,
                is_wholesale=quote.is_wholesale,
                quantity=quantity,
                product_name=product.name,
            ),
        )

    def _deduct_stock(self, sale, product, previous_qty, actor):
        new_qty = previous_qty - sale.quantity
        applied = self.store.update_product_quantity(
            product.pk,
            new_qty,
            expected_previous_quantity=previous_qty,
        )
        if not applied:
            raise ConflictError(
                f'Stock for {product.name} changed while recording the sale '
                f'(expected {previous_qty} on hand)'
            )

        return self.store.insert_stock_change(StockChangeDraft(
            product_id=product.pk,
            product_name=product.name,
            change_type=StockChangeTypeChoices.SALE_DEDUCT.value,
            quantity=-sale.quantity,
            previous_qty=previous_qty,
            new_qty=new_qty,
            changed_by=actor.actor_id,
            reason=f'Sale: {sale.quantity} units @ {sale.unit_price}',
            sale_id=sale.id,
        ))


def record_sale(product_id, quantity, actor, customer: Optional[CustomerInfo] = None,
                payment: Optional[PaymentInfo] = None, executor=None,
                max_attempts=None) -> SaleOutcome:
    """
    Record a sale and report the outcome without raising POS errors.

    ConflictError is retried (fresh fetch, fresh price, fresh snapshot) up
    to POS_PRICING['SALE_CONFLICT_MAX_ATTEMPTS'] attempts. Every other
    error is returned on the first occurrence, including InvalidInputError
    for a non-positive quantity or overpaid payment.
    """
    executor = executor or SaleTransactionExecutor.from_settings()
    if max_attempts is None:
        max_attempts = settings.POS_PRICING.get('SALE_CONFLICT_MAX_ATTEMPTS', 3)

    start_time = time.time()
    attempt = 0

    with trace_span('record_sale', attributes={
        'product_id': str(product_id),
        'quantity': quantity,
        'actor_role': actor.role,
    }):
        while True:
            attempt += 1
            try:
                result = executor.execute(product_id, quantity, actor, customer=customer, payment=payment)
            except ConflictError as e:
                if attempt < max_attempts:
                    metrics.sale_conflict_retries_total.inc()
                    logger.info(
                        'Sale conflict, retrying',
                        extra={'product_id': str(product_id), 'attempt': attempt}
                    )
                    continue
                error = e
            except POSError as e:
                error = e
            else:
                duration = time.time() - start_time
                metrics.sales_record_duration_seconds.observe(duration)
                metrics.sales_recorded_total.labels(
                    result='success',
                    sale_type=result.sale.sale_type,
                ).inc()
                add_span_attribute('sale_id', str(result.sale.id))
                log_sale_recorded(result.sale, attempts=attempt, duration_ms=int(duration * 1000))
                return SaleOutcome(result=result, attempts=attempt)

            metrics.sales_record_duration_seconds.observe(time.time() - start_time)
            metrics.sales_recorded_total.labels(result=error.error_type, sale_type='unknown').inc()
            metrics.exceptions_total.labels(
                exception_type=type(error).__name__,
                location='record_sale',
            ).inc()
            add_span_attribute('error_type', error.error_type)
            log_sale_failed(product_id, error, attempts=attempt)
            return SaleOutcome(error=error, attempts=attempt)


def quote_sale(product_id, quantity, store=None, catalog=None, resolver=None):
    """
    Price preview for the sale form. Reads only.

    Raises NotFoundError, ConfigurationError or ValueError.
    """
    store = store or DjangoInventoryStore()
    catalog = catalog or PriceCatalog.from_settings(store=store)
    resolver = resolver or PricingResolver.from_settings()

    stored = store.find_product(product_id)
    if stored is None:
        raise NotFoundError(f'Product {product_id} not found')

    product = catalog.apply(stored)
    quote = resolver.resolve(product, quantity)
    return {
        'product_id': str(product.pk),
        'product_name': product.name,
        'quantity': quantity,
        'unit_price': quote.unit_price,
        'total_amount': quote.unit_price * quantity,
        'is_wholesale': quote.is_wholesale,
        'wholesale_threshold': resolver.threshold_for(product.category),
        'available': product.current_qty,
        'price_source': product.price_source,
    }
