"""
Stock services - Business logic for stock additions and price overrides.

Every mutation appends a StockChange in the same transaction as the
product update. Quantity updates are compare-and-set against the value
read, and retried when another writer got there first.
"""
from dataclasses import dataclass

from django.conf import settings

from apps.core.errors import ConfigurationError, ConflictError, NotFoundError
from apps.core.observability import get_sanitized_logger, log_domain_event, metrics
from apps.core.observability.events import log_stock_change
from apps.core.observability.tracing import trace_span
from apps.products.catalog import PriceCatalog
from apps.products.models import Product

from .models import StockChange, StockChangeTypeChoices
from .storage import DjangoInventoryStore, StockChangeDraft

logger = get_sanitized_logger(__name__)


@dataclass(frozen=True)
class StockAdjustment:
    product: Product
    previous_qty: int
    new_qty: int
    change: StockChange


def add_stock(product_id, quantity, actor, reason='Stock addition', store=None, max_attempts=None) -> StockAdjustment:
    """
    Add received units to a product.

    Raises:
        ValueError: quantity is not a positive integer
        NotFoundError: no such product
        ConflictError: stock kept changing for max_attempts attempts
        PersistenceError: storage failure (nothing committed)
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValueError(f'quantity must be a positive integer, got {quantity!r}')

    store = store or DjangoInventoryStore()
    if max_attempts is None:
        max_attempts = settings.POS_PRICING.get('SALE_CONFLICT_MAX_ATTEMPTS', 3)

    with trace_span('add_stock', attributes={'product_id': str(product_id), 'quantity': quantity}):
        for attempt in range(1, max_attempts + 1):
            product = store.find_product(product_id)
            if product is None:
                raise NotFoundError(f'Product {product_id} not found')

            previous_qty = product.current_qty
            new_qty = previous_qty + quantity

            with store.atomic():
                if not store.update_product_quantity(product.pk, new_qty, expected_previous_quantity=previous_qty):
                    logger.info(
                        'Stock addition conflict, retrying',
                        extra={'product_id': str(product.pk), 'attempt': attempt}
                    )
                    continue
                change = store.insert_stock_change(StockChangeDraft(
                    product_id=product.pk,
                    product_name=product.name,
                    change_type=StockChangeTypeChoices.ADD_STOCK.value,
                    quantity=quantity,
                    previous_qty=previous_qty,
                    new_qty=new_qty,
                    changed_by=actor.actor_id,
                    reason=reason,
                ))
            break
        else:
            raise ConflictError(
                f'Stock for product {product_id} kept changing; gave up after {max_attempts} attempts'
            )

    product.current_qty = new_qty
    metrics.stock_changes_total.labels(change_type=change.change_type).inc()
    log_stock_change(change)
    log_domain_event(
        'stock_added',
        entity_type='Product',
        entity_id=str(product.pk),
        quantity=quantity,
        previous_qty=previous_qty,
        new_qty=new_qty,
        changed_by=actor.actor_id,
    )
    return StockAdjustment(product=product, previous_qty=previous_qty, new_qty=new_qty, change=change)


def override_prices(product_id, retail, wholesale, actor, reason='Manual price override', store=None, catalog=None) -> StockChange:
    """
    Set a product's stored retail and wholesale prices.

    SKUs on the authoritative price list are refused: their prices come
    from the list and reconciliation would revert the override.

    Raises:
        ValueError: a price is not a positive integer
        ConfigurationError: wholesale > retail, or SKU is list-managed
        NotFoundError: no such product
        PersistenceError: storage failure (nothing committed)
    """
    for label, value in (('retail', retail), ('wholesale', wholesale)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f'{label} price must be a positive integer, got {value!r}')

    if wholesale > retail:
        raise ConfigurationError(f'Wholesale price {wholesale} cannot exceed retail price {retail}')

    store = store or DjangoInventoryStore()
    catalog = catalog or PriceCatalog.from_settings(store=store)

    product = store.find_product(product_id)
    if product is None:
        raise NotFoundError(f'Product {product_id} not found')

    if product.sku in catalog:
        raise ConfigurationError(
            f'{product.sku} is priced by the authoritative price list; update the list instead'
        )

    old_retail, old_wholesale = product.retail_price, product.wholesale_price

    with trace_span('override_prices', attributes={'product_id': str(product.pk)}):
        with store.atomic():
            store.update_product_prices(product.pk, retail, wholesale)
            change = store.insert_stock_change(StockChangeDraft(
                product_id=product.pk,
                product_name=product.name,
                change_type=StockChangeTypeChoices.PRICE_OVERRIDE.value,
                quantity=0,
                previous_qty=product.current_qty,
                new_qty=product.current_qty,
                changed_by=actor.actor_id,
                reason=(
                    f'{reason}: retail {old_retail} -> {retail}, '
                    f'wholesale {old_wholesale} -> {wholesale}'
                ),
            ))

    metrics.stock_changes_total.labels(change_type=change.change_type).inc()
    log_domain_event(
        'price_override',
        entity_type='Product',
        entity_id=str(product.pk),
        sku=product.sku,
        old_retail=old_retail,
        new_retail=retail,
        old_wholesale=old_wholesale,
        new_wholesale=wholesale,
        changed_by=actor.actor_id,
    )
    return change
