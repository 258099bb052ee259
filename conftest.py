"""
Pytest configuration for the entire test suite.

This file configures test database to use SQLite for faster tests.
"""
import django
from django.conf import settings


def pytest_configure():
    """Configure Django settings for tests."""
    if not settings.configured:
        settings.configure()

    # Force SQLite for tests (faster, no Docker dependency)
    settings.DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }
    # pytest-django may already have run django.setup(), which caches the
    # connection settings; drop the cache so the SQLite override applies.
    from django.db import connections
    for alias in list(connections.settings):
        try:
            del connections[alias]
        except AttributeError:
            pass
    connections._settings = None
    connections.__dict__.pop('settings', None)

    django.setup()
