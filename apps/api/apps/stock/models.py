"""
Stock ledger models.

Every mutation of a product's quantity or prices appends one StockChange.
Rows are never updated or deleted.
"""
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.models import AppendOnlyModel


class StockChangeTypeChoices(models.TextChoices):
    """
    Stock ledger entry types.

    ADD_STOCK: quantity > 0
    SALE_DEDUCT: quantity < 0
    PRICE_OVERRIDE: quantity == 0
    """
    ADD_STOCK = 'ADD_STOCK', _('Add Stock')
    SALE_DEDUCT = 'SALE_DEDUCT', _('Sale Deduct')
    PRICE_OVERRIDE = 'PRICE_OVERRIDE', _('Price Override')


class StockChange(AppendOnlyModel):
    """
    Append-only audit entry for an inventory mutation.

    quantity is the signed delta; new_qty == previous_qty + quantity.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        'products.Product',
        on_delete=models.PROTECT,
        related_name='stock_changes',
        verbose_name=_('Product')
    )
    product_name = models.CharField(_('Product Name'), max_length=255)

    change_type = models.CharField(
        _('Change Type'),
        max_length=20,
        choices=StockChangeTypeChoices.choices
    )
    quantity = models.IntegerField(
        _('Quantity'),
        help_text=_('Signed delta: positive for additions, negative for sales')
    )
    previous_qty = models.PositiveIntegerField(_('Previous Quantity'))
    new_qty = models.PositiveIntegerField(_('New Quantity'))

    changed_by = models.CharField(_('Changed By'), max_length=150)
    reason = models.CharField(_('Reason'), max_length=255, blank=True)

    sale = models.ForeignKey(
        'sales.Sale',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='stock_changes',
        verbose_name=_('Sale'),
        help_text=_('Originating sale for SALE_DEDUCT entries')
    )

    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)

    class Meta:
        db_table = 'stock_changes'
        ordering = ['-created_at']
        verbose_name = _('Stock Change')
        verbose_name_plural = _('Stock Changes')
        indexes = [
            models.Index(fields=['product', '-created_at'], name='idx_stockchange_product_date'),
            models.Index(fields=['change_type'], name='idx_stockchange_type'),
            models.Index(fields=['sale'], name='idx_stockchange_sale'),
        ]

    def __str__(self):
        sign = '+' if self.quantity > 0 else ''
        return f"{self.change_type}: {sign}{self.quantity} x {self.product_name}"
