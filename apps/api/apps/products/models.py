"""
Product models - beverage catalog and price correction audit.
"""
import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.models import AppendOnlyModel


class ProductCategoryChoices(models.TextChoices):
    """Product category; drives the wholesale quantity threshold."""
    WATER = 'water', _('Water')
    GLASS_BOTTLE = 'glass_bottle', _('Glass Bottle')
    PLASTIC_BOTTLE = 'plastic_bottle', _('Plastic Bottle')
    CAN = 'can', _('Can')
    STANDARD = 'standard', _('Standard')


class Product(models.Model):
    """
    Product model - beverages sold per unit (crate, pack, bottle).

    Prices are whole currency units. Prices change only through the price
    override service or reconciliation; quantity only through stock
    addition or sale deduction.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Basic info
    sku = models.CharField(_('SKU'), max_length=100, unique=True)
    name = models.CharField(_('Name'), max_length=255)
    category = models.CharField(
        _('Category'),
        max_length=20,
        choices=ProductCategoryChoices.choices,
        default=ProductCategoryChoices.STANDARD
    )

    # Pricing
    retail_price = models.PositiveIntegerField(_('Retail Price'))
    wholesale_price = models.PositiveIntegerField(_('Wholesale Price'))

    # Inventory
    current_qty = models.PositiveIntegerField(_('Current Quantity'), default=0)
    min_qty = models.PositiveIntegerField(_('Minimum Quantity'), default=10)

    # Status
    is_active = models.BooleanField(_('Active'), default=True)

    # Metadata
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)
    updated_at = models.DateTimeField(_('Updated At'), auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['name']
        indexes = [
            models.Index(fields=['name'], name='idx_product_name'),
            models.Index(fields=['category'], name='idx_product_category'),
        ]
        verbose_name = _('Product')
        verbose_name_plural = _('Products')

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def clean(self):
        super().clean()
        if (
            self.retail_price is not None
            and self.wholesale_price is not None
            and self.wholesale_price > self.retail_price
        ):
            raise ValidationError({
                'wholesale_price': _('Wholesale price cannot exceed retail price.')
            })

    @property
    def is_low_stock(self):
        """Check if stock is at or below the minimum quantity."""
        return self.current_qty <= self.min_qty

    @property
    def stock_value(self):
        """On-hand quantity valued at wholesale price."""
        return self.current_qty * self.wholesale_price


class PriceCorrection(AppendOnlyModel):
    """
    Audit record of a stored price corrected to the authoritative price list.

    Written only by PriceCatalog.reconcile().
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name='price_corrections',
        verbose_name=_('Product')
    )
    sku = models.CharField(_('SKU'), max_length=100)

    old_retail = models.PositiveIntegerField(_('Old Retail Price'))
    new_retail = models.PositiveIntegerField(_('New Retail Price'))
    old_wholesale = models.PositiveIntegerField(_('Old Wholesale Price'))
    new_wholesale = models.PositiveIntegerField(_('New Wholesale Price'))

    reason = models.CharField(_('Reason'), max_length=255, blank=True)
    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)

    class Meta:
        db_table = 'price_corrections'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['product', '-created_at'], name='idx_pricecorr_product_date'),
        ]
        verbose_name = _('Price Correction')
        verbose_name_plural = _('Price Corrections')

    def __str__(self):
        return (
            f"{self.sku}: {self.old_retail}/{self.old_wholesale} -> "
            f"{self.new_retail}/{self.new_wholesale}"
        )
