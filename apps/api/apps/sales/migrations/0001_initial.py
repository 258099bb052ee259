# Initial migration for POS sales

from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('products', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Sale',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('product_name', models.CharField(help_text='Product name at time of sale', max_length=255, verbose_name='Product Name')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantity')),
                ('unit_price', models.PositiveIntegerField(verbose_name='Unit Price')),
                ('total_amount', models.PositiveBigIntegerField(verbose_name='Total Amount')),
                ('sale_type', models.CharField(
                    choices=[('RETAIL', 'Retail'), ('WHOLESALE', 'Wholesale')],
                    max_length=10,
                    verbose_name='Sale Type'
                )),
                ('customer_name', models.CharField(blank=True, max_length=255, verbose_name='Customer Name')),
                ('customer_phone', models.CharField(blank=True, max_length=50, verbose_name='Customer Phone')),
                ('customer_type', models.CharField(
                    blank=True,
                    choices=[('retail', 'Retail'), ('wholesale', 'Wholesale')],
                    max_length=10,
                    verbose_name='Customer Type'
                )),
                ('payment_status', models.CharField(
                    choices=[('paid', 'Paid'), ('partial', 'Partial'), ('owing', 'Owing')],
                    default='paid',
                    max_length=10,
                    verbose_name='Payment Status'
                )),
                ('amount_paid', models.PositiveBigIntegerField(default=0, verbose_name='Amount Paid')),
                ('amount_owing', models.PositiveBigIntegerField(default=0, verbose_name='Amount Owing')),
                ('sold_by', models.CharField(max_length=150, verbose_name='Sold By')),
                ('sold_by_role', models.CharField(blank=True, max_length=50, verbose_name='Sold By Role')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('product', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='sales',
                    to='products.product',
                    verbose_name='Product'
                )),
            ],
            options={
                'verbose_name': 'Sale',
                'verbose_name_plural': 'Sales',
                'db_table': 'sales',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='sale',
            index=models.Index(fields=['-created_at'], name='idx_sale_created'),
        ),
        migrations.AddIndex(
            model_name='sale',
            index=models.Index(fields=['product', '-created_at'], name='idx_sale_product_date'),
        ),
        migrations.AddIndex(
            model_name='sale',
            index=models.Index(fields=['sale_type'], name='idx_sale_type'),
        ),
    ]
