from pathlib import Path

from environs import Env

env = Env()
env.read_env(recurse=False)

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = env.str('SECRET_KEY', 'django-insecure-3c7k!w0q9v$lrx2u#e8m1d^h6p@t5yb(zn4a&j=f%s+g)io_k')

ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', [])

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'catalog_sync',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'core.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'core.wsgi.application'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    },
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'loggers': {
        'catalog_sync': {
            'handlers': ['console'],
            'level': env.str('LOG_LEVEL', 'INFO'),
        },
    },
}

# Remote catalog
CATALOG_API_URL = env.str('CATALOG_API_URL', '')
CATALOG_ACCESS_TOKEN = env.str('CATALOG_ACCESS_TOKEN', '')
CATALOG_FETCH_TIMEOUT = env.float('CATALOG_FETCH_TIMEOUT', 30.0)

# Destination table, physical name is prefix + table name
CATALOG_TABLE_PREFIX = env.str('CATALOG_TABLE_PREFIX', '')
CATALOG_TABLE_NAME = env.str('CATALOG_TABLE_NAME', 'shopify_products')

# One of: five_minutes, hourly, daily
CATALOG_SYNC_SCHEDULE = env.str('CATALOG_SYNC_SCHEDULE', 'five_minutes')
CATALOG_SYNC_LOCK_TIMEOUT = env.int('CATALOG_SYNC_LOCK_TIMEOUT', 15 * 60)

SYNC_SCHEDULE_SECONDS = {
    'five_minutes': 300,
    'hourly': 3600,
    'daily': 86400,
}

# Celery
CELERY_BROKER_URL = env.str('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = CELERY_BROKER_URL
# Beat only ticks; the stored schedule option decides whether a tick syncs
CATALOG_SYNC_BEAT_TICK = env.int('CATALOG_SYNC_BEAT_TICK', 60)
CELERY_BEAT_SCHEDULE = {
    'sync-catalog-if-due': {
        'task': 'catalog_sync.tasks.sync_products_if_due',
        'schedule': CATALOG_SYNC_BEAT_TICK,
    },
}
