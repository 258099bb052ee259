"""
Management command to correct stored prices to the authoritative list.

Usage:
    python manage.py reconcile_prices
    python manage.py reconcile_prices --dry-run

Run at deploy/startup after migrate. Safe to run repeatedly.
"""
from django.core.management.base import BaseCommand

from apps.products.catalog import PriceCatalog


class Command(BaseCommand):
    help = 'Correct stored product prices that drifted from the authoritative price list'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List products that would be corrected without writing anything'
        )

    def handle(self, *args, **options):
        catalog = PriceCatalog.from_settings()

        if options['dry_run']:
            drifted = [
                (product, catalog.drift(product))
                for product in catalog.store.list_products()
            ]
            drifted = [(product, price) for product, price in drifted if price is not None]
            for product, price in drifted:
                self.stdout.write(
                    f'{product.sku}: {product.retail_price}/{product.wholesale_price} '
                    f'-> {price.retail}/{price.wholesale}'
                )
            self.stdout.write(self.style.WARNING(f'\nDry run: {len(drifted)} product(s) would be corrected'))
            return

        corrections = catalog.reconcile()
        for correction in corrections:
            self.stdout.write(self.style.SUCCESS(f'Corrected {correction}'))

        self.stdout.write(self.style.SUCCESS(f'\nSummary: {len(corrections)} product(s) corrected'))
