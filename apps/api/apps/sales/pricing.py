"""
Tiered pricing: decide the unit price for a quantity of a product.

Pure decision with no side effects. The wholesale price applies when the
quantity reaches the minimum configured for the product's category.
"""
from dataclasses import dataclass
from typing import Dict, Optional

from django.conf import settings

from apps.core.errors import ConfigurationError


@dataclass(frozen=True)
class PriceQuote:
    unit_price: int
    is_wholesale: bool


def _check_threshold(label, value):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f'Wholesale threshold for {label} must be a positive integer, got {value!r}')


class PricingResolver:
    """
    Resolve unit prices from a category -> minimum-wholesale-quantity table.

    Args:
        thresholds: mapping category -> minimum quantity for wholesale
        default_threshold: used for categories missing from the table
    """

    def __init__(self, thresholds: Optional[Dict[str, int]] = None, default_threshold: int = 24):
        thresholds = dict(thresholds or {})
        for category, value in thresholds.items():
            _check_threshold(category, value)
        _check_threshold('default', default_threshold)

        self.thresholds = thresholds
        self.default_threshold = default_threshold

    @classmethod
    def from_settings(cls):
        pricing = settings.POS_PRICING
        return cls(
            thresholds=pricing.get('WHOLESALE_THRESHOLDS', {}),
            default_threshold=pricing.get('DEFAULT_WHOLESALE_THRESHOLD', 24),
        )

    def threshold_for(self, category) -> int:
        return self.thresholds.get(category, self.default_threshold)

    def resolve(self, product, quantity) -> PriceQuote:
        """
        Quote the unit price for selling `quantity` units of `product`.

        Raises:
            ValueError: quantity is not a positive integer
            ConfigurationError: product's wholesale price exceeds retail
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValueError(f'quantity must be a positive integer, got {quantity!r}')

        if product.wholesale_price > product.retail_price:
            raise ConfigurationError(
                f'{product.sku}: wholesale price {product.wholesale_price} '
                f'exceeds retail price {product.retail_price}'
            )

        if quantity >= self.threshold_for(product.category):
            return PriceQuote(unit_price=product.wholesale_price, is_wholesale=True)
        return PriceQuote(unit_price=product.retail_price, is_wholesale=False)


def resolve_price(product, quantity) -> PriceQuote:
    """Quote using the thresholds from settings."""
    return PricingResolver.from_settings().resolve(product, quantity)
