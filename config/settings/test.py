"""
Pallet Tracker — Test Settings

In-memory SQLite and no throttling. Activated by pytest through
DJANGO_SETTINGS_MODULE in pyproject.toml.

@file config/settings/test.py
"""

from .base import *  # noqa: F401, F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
}

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []  # noqa: F405

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

LOGGING['loggers']['pallet_tracker']['level'] = 'WARNING'  # noqa: F405
