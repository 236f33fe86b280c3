"""
BananaTrack — Test Settings

Used by pytest (see pyproject.toml). SQLite in memory, no throttling,
fast password hashing.

@file config/settings/test.py
"""

from .base import *  # noqa: F401, F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []  # noqa: F405

LOGGING['loggers']['bananatrack']['level'] = 'WARNING'  # noqa: F405
