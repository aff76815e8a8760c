import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

# --------------------------------
# Paths
# --------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(BASE_DIR / '.env')

# --------------------------------
# Security / Debug
# --------------------------------
SECRET_KEY = os.getenv('SECRET_KEY', 'django-insecure-currency-dev-key')
DEBUG = os.getenv('DEBUG', 'True') == 'True'

ALLOWED_HOSTS = [h for h in os.getenv('ALLOWED_HOSTS', '127.0.0.1,localhost,testserver').split(',') if h]

# Application definition
INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.staticfiles',
    'rest_framework',
    'drf_spectacular',
    'apps.currency',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'core.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'core.wsgi.application'

# Nothing is persisted; the database only backs Django's contrib apps.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# --------------------------------
# Django REST Framework
# --------------------------------
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'Booking Currency API',
    'DESCRIPTION': 'Currency conversion, display formatting and quote totals for travel bookings',
    'VERSION': '1.0.0',
}

# --------------------------------
# Currency
# --------------------------------
# Rate-table providers in priority order; the static table is always the last resort
CURRENCY_RATE_PROVIDERS = [p.strip() for p in os.getenv('CURRENCY_RATE_PROVIDERS', 'static').split(',') if p.strip()]
CURRENCY_DEFAULT_SPREAD = Decimal(os.getenv('CURRENCY_DEFAULT_SPREAD', '0.02'))
CURRENCY_FOLD_CASE_IDENTITY = os.getenv('CURRENCY_FOLD_CASE_IDENTITY', 'False') == 'True'

EXCHANGE_RATE_API_URL = os.getenv('EXCHANGE_RATE_API_URL', 'https://api.exchangerate-api.com/v4/latest')
EXCHANGE_RATE_API_TIMEOUT = int(os.getenv('EXCHANGE_RATE_API_TIMEOUT', '10'))

# --------------------------------
# Logging
# --------------------------------
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
        },
    },
}
