"""
Management command to create POS role groups.

Usage:
    python manage.py create_pos_groups

Creates (idempotently):
- General Manager: prices, reconciliation, sales, stock
- Admin: prices, reconciliation, sales, stock
- Sales Management: sales and stock additions
"""
from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand

from apps.core.context import RoleChoices


class Command(BaseCommand):
    help = 'Create POS role groups (General Manager, Admin, Sales Management)'

    def handle(self, *args, **options):
        created_count = 0
        existing_count = 0

        for role in RoleChoices:
            group, created = Group.objects.get_or_create(name=role.value)

            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f'Created group: {group.name}'))
            else:
                existing_count += 1
                self.stdout.write(self.style.WARNING(f'Group already exists: {group.name}'))

        self.stdout.write(
            self.style.SUCCESS(f'\nSummary: {created_count} created, {existing_count} existing')
        )
