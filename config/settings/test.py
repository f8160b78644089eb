"""
Back office — Test Settings

Used by pytest (see [tool.pytest.ini_options] in pyproject.toml).
SQLite by default; point DATABASE_URL at PostgreSQL to exercise row locks.

@file config/settings/test.py
"""

from .base import *  # noqa: F401, F403

DEBUG = False

DATABASES = {
    'default': env.db('DATABASE_URL', default='sqlite:///test-backoffice.sqlite3'),  # noqa: F405
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []  # noqa: F405

LOW_STOCK_THRESHOLD = 10

LOGGING['loggers']['backoffice']['propagate'] = True  # noqa: F405
