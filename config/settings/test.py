"""Settings used by the pytest suite."""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

BUSINESS_TIME_ZONE = 'Europe/London'
BOOKING_WINDOW_MONTHS = 6
BOOKING_REFERENCE_PREFIX = 'EAT'

LOGGING['handlers']['console']['level'] = 'WARNING'  # noqa: F405
