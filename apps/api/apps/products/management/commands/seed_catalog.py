"""
Management command to seed the beverage catalog.

Usage:
    python manage.py seed_catalog
    python manage.py seed_catalog --initial-qty 100

Creates (idempotently) one Product per SKU on the authoritative price
list, priced from that list. Existing SKUs are left untouched; use
reconcile_prices to fix their prices.
"""
from django.conf import settings
from django.core.management.base import BaseCommand

from apps.products.catalog import PriceCatalog
from apps.products.models import Product, ProductCategoryChoices

# sku -> (display name, category)
CATALOG_PRODUCTS = {
    'NIRVANA-1L': ('Nirvana Water 1L', ProductCategoryChoices.WATER),
    'EVA-1.5L': ('Eva Water 1.5L', ProductCategoryChoices.WATER),
    'AQUAFINA-50CL': ('Aquafina 50cl', ProductCategoryChoices.WATER),
    'AQUAFINA-75CL': ('Aquafina 75cl', ProductCategoryChoices.WATER),
    'PEPSI-RGB': ('Pepsi RGB', ProductCategoryChoices.GLASS_BOTTLE),
    '7UP-RGB': ('7Up RGB', ProductCategoryChoices.GLASS_BOTTLE),
    'SK-RGB': ('Schweppes RGB', ProductCategoryChoices.GLASS_BOTTLE),
    'COKE-RGB-50CL': ('Coke RGB 50cl', ProductCategoryChoices.GLASS_BOTTLE),
    'COKE-ZERO-RGB': ('Coke Zero RGB', ProductCategoryChoices.GLASS_BOTTLE),
    'COKE-RED-RGB': ('Coke Red RGB', ProductCategoryChoices.GLASS_BOTTLE),
    'CF-PET': ('Chi Fanta PET', ProductCategoryChoices.PLASTIC_BOTTLE),
    'RAZZLE-40CL': ('Razzle 40cl', ProductCategoryChoices.PLASTIC_BOTTLE),
    'RAZZLE-60CL': ('Razzle 60cl', ProductCategoryChoices.PLASTIC_BOTTLE),
    'BIG-COLA-35CL': ('Big Cola 35cl', ProductCategoryChoices.PLASTIC_BOTTLE),
    'C-FRUITY': ('Chivita Fruity', ProductCategoryChoices.PLASTIC_BOTTLE),
    'LACASERA-35CL': ('La Casera 35cl', ProductCategoryChoices.PLASTIC_BOTTLE),
    'AMERICAN-COLA': ('American Cola', ProductCategoryChoices.PLASTIC_BOTTLE),
    'SK-30CL': ('Schweppes 30cl', ProductCategoryChoices.PLASTIC_BOTTLE),
    'SK-50CL': ('Schweppes 50cl', ProductCategoryChoices.PLASTIC_BOTTLE),
    'PET-60CL': ('Pepsi PET 60cl', ProductCategoryChoices.PLASTIC_BOTTLE),
    'PET-40CL': ('Pepsi PET 40cl', ProductCategoryChoices.PLASTIC_BOTTLE),
    'DUBIC-CAN': ('Dubic Can', ProductCategoryChoices.CAN),
}


class Command(BaseCommand):
    help = 'Create catalog products from the authoritative price list'

    def add_arguments(self, parser):
        parser.add_argument(
            '--initial-qty',
            type=int,
            default=0,
            help='Opening quantity for newly created products (default 0)'
        )
        parser.add_argument(
            '--min-qty',
            type=int,
            default=10,
            help='Low-stock threshold for newly created products (default 10)'
        )

    def handle(self, *args, **options):
        catalog = PriceCatalog.from_settings()
        created_count = 0
        existing_count = 0

        for sku in catalog.skus:
            price = catalog.get_authoritative_price(sku)
            name, category = CATALOG_PRODUCTS.get(sku, (sku, ProductCategoryChoices.STANDARD))

            product, created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    'name': name,
                    'category': category,
                    'retail_price': price.retail,
                    'wholesale_price': price.wholesale,
                    'current_qty': options['initial_qty'],
                    'min_qty': options['min_qty'],
                }
            )

            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f'Created product: {product}'))
            else:
                existing_count += 1
                self.stdout.write(self.style.WARNING(f'Product already exists: {product}'))

        self.stdout.write(
            self.style.SUCCESS(
                f'\nSummary: {created_count} created, {existing_count} existing '
                f'({getattr(settings, "POS_CURRENCY", "NGN")} price list, {len(catalog)} SKUs)'
            )
        )
