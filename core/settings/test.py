from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CATALOG_API_URL = 'https://catalog.example.test/admin/api/2024-01/products.json'
CATALOG_ACCESS_TOKEN = 'shpat-test-token'
CATALOG_TABLE_PREFIX = 'test_'
CATALOG_TABLE_NAME = 'shopify_products'
CATALOG_SYNC_SCHEDULE = 'five_minutes'

CELERY_TASK_ALWAYS_EAGER = True
