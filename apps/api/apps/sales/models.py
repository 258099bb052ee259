"""Sales models - POS transactions."""
import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.models import AppendOnlyModel


class SaleTypeChoices(models.TextChoices):
    """Which price tier a sale was charged at."""
    RETAIL = 'RETAIL', _('Retail')
    WHOLESALE = 'WHOLESALE', _('Wholesale')


class PaymentStatusChoices(models.TextChoices):
    PAID = 'paid', _('Paid')
    PARTIAL = 'partial', _('Partial')
    OWING = 'owing', _('Owing')


class CustomerTypeChoices(models.TextChoices):
    RETAIL = 'retail', _('Retail')
    WHOLESALE = 'wholesale', _('Wholesale')


class Sale(AppendOnlyModel):
    """
    Sale transaction: one product, one quantity, one unit price.

    Business Rules:
    - total_amount == unit_price * quantity, computed once by the executor
    - sale_type reflects the tier the resolver chose
    - immutable once created; corrections happen through new records
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        'products.Product',
        on_delete=models.PROTECT,
        related_name='sales',
        verbose_name=_('Product')
    )
    product_name = models.CharField(
        _('Product Name'),
        max_length=255,
        help_text=_('Product name at time of sale')
    )

    # Pricing snapshot
    quantity = models.PositiveIntegerField(_('Quantity'))
    unit_price = models.PositiveIntegerField(_('Unit Price'))
    total_amount = models.PositiveBigIntegerField(_('Total Amount'))
    sale_type = models.CharField(
        _('Sale Type'),
        max_length=10,
        choices=SaleTypeChoices.choices
    )

    # Customer (optional)
    customer_name = models.CharField(_('Customer Name'), max_length=255, blank=True)
    customer_phone = models.CharField(_('Customer Phone'), max_length=50, blank=True)
    customer_type = models.CharField(
        _('Customer Type'),
        max_length=10,
        choices=CustomerTypeChoices.choices,
        blank=True
    )

    # Payment
    payment_status = models.CharField(
        _('Payment Status'),
        max_length=10,
        choices=PaymentStatusChoices.choices,
        default=PaymentStatusChoices.PAID
    )
    amount_paid = models.PositiveBigIntegerField(_('Amount Paid'), default=0)
    amount_owing = models.PositiveBigIntegerField(_('Amount Owing'), default=0)

    # Actor
    sold_by = models.CharField(_('Sold By'), max_length=150)
    sold_by_role = models.CharField(_('Sold By Role'), max_length=50, blank=True)

    created_at = models.DateTimeField(_('Created At'), auto_now_add=True)

    class Meta:
        db_table = 'sales'
        ordering = ['-created_at']
        verbose_name = _('Sale')
        verbose_name_plural = _('Sales')
        indexes = [
            models.Index(fields=['-created_at'], name='idx_sale_created'),
            models.Index(fields=['product', '-created_at'], name='idx_sale_product_date'),
            models.Index(fields=['sale_type'], name='idx_sale_type'),
        ]

    def __str__(self):
        return f"{self.product_name} x{self.quantity} @ {self.unit_price} ({self.sale_type})"

    def clean(self):
        super().clean()
        if self.quantity and self.unit_price and self.total_amount != self.quantity * self.unit_price:
            raise ValidationError({
                'total_amount': _('Total amount must equal unit price times quantity.')
            })
        if self.amount_paid + self.amount_owing > self.total_amount:
            raise ValidationError({
                'amount_paid': _('Amount paid plus amount owing cannot exceed the total.')
            })
