"""
Management command to ensure superuser exists (for Docker startup).
"""
import os

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand

from apps.core.context import RoleChoices


class Command(BaseCommand):
    help = 'Create the General Manager superuser if it does not exist'

    def handle(self, *args, **options):
        User = get_user_model()

        username = os.environ.get('DJANGO_SUPERUSER_USERNAME', 'ceo')
        email = os.environ.get('DJANGO_SUPERUSER_EMAIL', 'ceo@example.com')
        password = os.environ.get('DJANGO_SUPERUSER_PASSWORD', 'admin123dev')

        if User.objects.filter(username=username).exists():
            self.stdout.write(self.style.WARNING(f'Superuser "{username}" already exists'))
            return

        user = User.objects.create_superuser(username=username, email=email, password=password)
        group, _ = Group.objects.get_or_create(name=RoleChoices.GENERAL_MANAGER.value)
        user.groups.add(group)
        self.stdout.write(self.style.SUCCESS(f'Superuser "{username}" created successfully'))
