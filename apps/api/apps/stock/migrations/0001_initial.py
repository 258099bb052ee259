# Initial migration for the stock change ledger

from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('products', '0001_initial'),
        ('sales', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='StockChange',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('product_name', models.CharField(max_length=255, verbose_name='Product Name')),
                ('change_type', models.CharField(
                    choices=[
                        ('ADD_STOCK', 'Add Stock'),
                        ('SALE_DEDUCT', 'Sale Deduct'),
                        ('PRICE_OVERRIDE', 'Price Override'),
                    ],
                    max_length=20,
                    verbose_name='Change Type'
                )),
                ('quantity', models.IntegerField(
                    help_text='Signed delta: positive for additions, negative for sales',
                    verbose_name='Quantity'
                )),
                ('previous_qty', models.PositiveIntegerField(verbose_name='Previous Quantity')),
                ('new_qty', models.PositiveIntegerField(verbose_name='New Quantity')),
                ('changed_by', models.CharField(max_length=150, verbose_name='Changed By')),
                ('reason', models.CharField(blank=True, max_length=255, verbose_name='Reason')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('product', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='stock_changes',
                    to='products.product',
                    verbose_name='Product'
                )),
                ('sale', models.ForeignKey(
                    blank=True,
                    help_text='Originating sale for SALE_DEDUCT entries',
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='stock_changes',
                    to='sales.sale',
                    verbose_name='Sale'
                )),
            ],
            options={
                'verbose_name': 'Stock Change',
                'verbose_name_plural': 'Stock Changes',
                'db_table': 'stock_changes',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='stockchange',
            index=models.Index(fields=['product', '-created_at'], name='idx_stockchange_product_date'),
        ),
        migrations.AddIndex(
            model_name='stockchange',
            index=models.Index(fields=['change_type'], name='idx_stockchange_type'),
        ),
        migrations.AddIndex(
            model_name='stockchange',
            index=models.Index(fields=['sale'], name='idx_stockchange_sale'),
        ),
    ]
