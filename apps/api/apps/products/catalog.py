"""
Authoritative price catalog and stored-price reconciliation.

The authoritative price list (settings.AUTHORITATIVE_PRICE_LIST) is the
source of truth for every SKU it names. Sales overlay it on the stored
product at read time; reconciliation rewrites stored prices that have
drifted and records a PriceCorrection for each rewrite.
"""
import copy
from dataclasses import dataclass
from typing import Dict, List, Optional

from django.conf import settings

from apps.core.errors import ConfigurationError, POSError
from apps.core.observability import get_sanitized_logger, log_domain_event, metrics
from apps.core.observability.events import log_price_corrected
from apps.core.observability.tracing import trace_span

from .models import PriceCorrection, Product

logger = get_sanitized_logger(__name__)

PRICE_SOURCE_AUTHORITATIVE = 'authoritative'
PRICE_SOURCE_STORED = 'stored'

CORRECTION_REASON = 'Corrected to authoritative price list'


@dataclass(frozen=True)
class AuthoritativePrice:
    retail: int
    wholesale: int


def _coerce_price(sku, entry) -> AuthoritativePrice:
    if isinstance(entry, AuthoritativePrice):
        retail, wholesale = entry.retail, entry.wholesale
    elif isinstance(entry, dict):
        try:
            retail, wholesale = entry['retail'], entry['wholesale']
        except KeyError as e:
            raise ConfigurationError(f'Price list entry {sku} is missing {e.args[0]!r}') from e
    else:
        try:
            retail, wholesale = entry
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f'Price list entry {sku} is malformed: {entry!r}') from e

    for label, value in (('retail', retail), ('wholesale', wholesale)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigurationError(
                f'Price list entry {sku}: {label} price must be a positive integer, got {value!r}'
            )

    if wholesale > retail:
        raise ConfigurationError(
            f'Price list entry {sku}: wholesale price {wholesale} exceeds retail price {retail}'
        )

    return AuthoritativePrice(retail=retail, wholesale=wholesale)


class PriceCatalog:
    """
    Authoritative prices keyed by SKU.

    Args:
        prices: mapping sku -> {'retail': int, 'wholesale': int}
            (AuthoritativePrice or (retail, wholesale) tuples also accepted)
        tolerance: stored prices within this distance of the authoritative
            price are left alone by reconcile()
        store: inventory store used by reconcile(); defaults to the Django store
    """

    def __init__(self, prices: Dict, tolerance: int = 10, store=None):
        if isinstance(tolerance, bool) or not isinstance(tolerance, int) or tolerance < 0:
            raise ConfigurationError(f'Price correction tolerance must be a non-negative integer, got {tolerance!r}')

        self._prices = {sku: _coerce_price(sku, entry) for sku, entry in (prices or {}).items()}
        self.tolerance = tolerance
        self._store = store

    @classmethod
    def from_settings(cls, store=None):
        return cls(
            prices=getattr(settings, 'AUTHORITATIVE_PRICE_LIST', {}),
            tolerance=settings.POS_PRICING.get('PRICE_CORRECTION_TOLERANCE', 10),
            store=store,
        )

    @property
    def store(self):
        if self._store is None:
            from apps.stock.storage import DjangoInventoryStore
            self._store = DjangoInventoryStore()
        return self._store

    @property
    def skus(self):
        return sorted(self._prices)

    def __contains__(self, sku):
        return sku in self._prices

    def __len__(self):
        return len(self._prices)

    def get_authoritative_price(self, sku) -> Optional[AuthoritativePrice]:
        return self._prices.get(sku)

    def apply(self, product: Product) -> Product:
        """
        Return the product as it should be priced right now.

        Listed SKUs get an unsaved copy carrying authoritative prices; the
        stored row is not touched. Unlisted products are returned as-is.
        """
        price = self.get_authoritative_price(product.sku)
        if price is None:
            product.price_source = PRICE_SOURCE_STORED
            return product

        priced = copy.copy(product)
        priced.retail_price = price.retail
        priced.wholesale_price = price.wholesale
        priced.price_source = PRICE_SOURCE_AUTHORITATIVE
        return priced

    def drift(self, product: Product) -> Optional[AuthoritativePrice]:
        """Authoritative price if the stored one is out of tolerance, else None."""
        price = self.get_authoritative_price(product.sku)
        if price is None:
            return None

        if (
            abs(product.retail_price - price.retail) > self.tolerance
            or abs(product.wholesale_price - price.wholesale) > self.tolerance
        ):
            return price
        return None

    def reconcile(self, stored_products=None) -> List[PriceCorrection]:
        """
        Rewrite drifted stored prices to the authoritative list.

        Each correction (price update + PriceCorrection row) commits on its
        own. A product that fails is logged, counted and skipped. Corrected
        products passed in are updated in place, so running twice in a row
        (with or without the same list) yields no corrections the second time.
        """
        if stored_products is None:
            stored_products = self.store.list_products()

        corrections = []
        failed = 0

        with trace_span('reconcile_prices', attributes={'catalog.size': len(self)}):
            for product in stored_products:
                price = self.drift(product)
                if price is None:
                    continue

                try:
                    correction = self._correct(product, price)
                except POSError as e:
                    failed += 1
                    metrics.price_corrections_total.labels(result='failed').inc()
                    log_domain_event(
                        'price_correction_failed',
                        entity_type='Product',
                        entity_id=str(product.pk),
                        result='failure',
                        sku=product.sku,
                        error_type=e.error_type,
                        error_message=str(e)[:200],
                    )
                    continue

                product.retail_price = price.retail
                product.wholesale_price = price.wholesale
                metrics.price_corrections_total.labels(result='corrected').inc()
                log_price_corrected(correction)
                corrections.append(correction)

        log_domain_event(
            'price_reconciliation_completed',
            corrected=len(corrections),
            failed=failed,
        )
        return corrections

    def _correct(self, product, price):
        from apps.stock.storage import PriceCorrectionDraft

        with self.store.atomic():
            self.store.update_product_prices(product.pk, price.retail, price.wholesale)
            return self.store.insert_price_correction(PriceCorrectionDraft(
                product_id=product.pk,
                sku=product.sku,
                old_retail=product.retail_price,
                new_retail=price.retail,
                old_wholesale=product.wholesale_price,
                new_wholesale=price.wholesale,
                reason=CORRECTION_REASON,
            ))


def get_catalog() -> PriceCatalog:
    """Catalog built from current settings."""
    return PriceCatalog.from_settings()


def reconcile_prices(stored_products=None) -> List[PriceCorrection]:
    """Reconcile stored prices against the settings price list."""
    return get_catalog().reconcile(stored_products)
