# Initial migration for the beverage product catalog

from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('sku', models.CharField(max_length=100, unique=True, verbose_name='SKU')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('category', models.CharField(
                    choices=[
                        ('water', 'Water'),
                        ('glass_bottle', 'Glass Bottle'),
                        ('plastic_bottle', 'Plastic Bottle'),
                        ('can', 'Can'),
                        ('standard', 'Standard'),
                    ],
                    default='standard',
                    max_length=20,
                    verbose_name='Category'
                )),
                ('retail_price', models.PositiveIntegerField(verbose_name='Retail Price')),
                ('wholesale_price', models.PositiveIntegerField(verbose_name='Wholesale Price')),
                ('current_qty', models.PositiveIntegerField(default=0, verbose_name='Current Quantity')),
                ('min_qty', models.PositiveIntegerField(default=10, verbose_name='Minimum Quantity')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'db_table': 'products',
                'ordering': ['name'],
            },
        ),
        migrations.AddIndex(
            model_name='product',
            index=models.Index(fields=['name'], name='idx_product_name'),
        ),
        migrations.AddIndex(
            model_name='product',
            index=models.Index(fields=['category'], name='idx_product_category'),
        ),
        migrations.CreateModel(
            name='PriceCorrection',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('sku', models.CharField(max_length=100, verbose_name='SKU')),
                ('old_retail', models.PositiveIntegerField(verbose_name='Old Retail Price')),
                ('new_retail', models.PositiveIntegerField(verbose_name='New Retail Price')),
                ('old_wholesale', models.PositiveIntegerField(verbose_name='Old Wholesale Price')),
                ('new_wholesale', models.PositiveIntegerField(verbose_name='New Wholesale Price')),
                ('reason', models.CharField(blank=True, max_length=255, verbose_name='Reason')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('product', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='price_corrections',
                    to='products.product',
                    verbose_name='Product'
                )),
            ],
            options={
                'verbose_name': 'Price Correction',
                'verbose_name_plural': 'Price Corrections',
                'db_table': 'price_corrections',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='pricecorrection',
            index=models.Index(fields=['product', '-created_at'], name='idx_pricecorr_product_date'),
        ),
    ]
