"""
Django settings for the Arijeem Insight 360 beverage POS project.
"""

import json
import os
from datetime import timedelta
from pathlib import Path

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Application version
VERSION = os.environ.get('APP_VERSION', '1.0.0')
COMMIT_HASH = os.environ.get('COMMIT_HASH', None)

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'dev-secret-key-change-in-production')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.environ.get('DJANGO_DEBUG', 'True') == 'True'

ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third-party apps
    'rest_framework',
    'rest_framework_simplejwt',
    'corsheaders',
    'drf_spectacular',

    # Local apps
    'apps.core',        # actor context, errors, observability
    'apps.products',    # catalog, authoritative prices, price corrections
    'apps.stock',       # stock change ledger, inventory store
    'apps.sales',       # pricing resolver, sale transactions, dashboard
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'corsheaders.middleware.CorsMiddleware',  # CORS before CommonMiddleware
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'apps.core.observability.correlation.RequestCorrelationMiddleware',  # Request correlation
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

# Database
DATABASES = {
    'default': {
        'ENGINE': os.environ.get('DATABASE_ENGINE', 'django.db.backends.postgresql'),
        'NAME': os.environ.get('DATABASE_NAME', 'arijeem_pos_db'),
        'USER': os.environ.get('DATABASE_USER', 'pos_user'),
        'PASSWORD': os.environ.get('DATABASE_PASSWORD', 'pos_dev_pass'),
        'HOST': os.environ.get('DATABASE_HOST', 'postgres'),
        'PORT': os.environ.get('DATABASE_PORT', '5432'),
    }
}

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
    },
]

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('DJANGO_TIME_ZONE', 'Africa/Lagos')
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ==============================================================================
# REST FRAMEWORK
# ==============================================================================
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': 50,
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'DEFAULT_FILTER_BACKENDS': [
        'rest_framework.filters.SearchFilter',
        'rest_framework.filters.OrderingFilter',
    ],
}

# ==============================================================================
# SIMPLE JWT
# ==============================================================================
SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(
        minutes=int(os.environ.get('JWT_ACCESS_TOKEN_LIFETIME_MINUTES', 30))
    ),
    'REFRESH_TOKEN_LIFETIME': timedelta(
        days=int(os.environ.get('JWT_REFRESH_TOKEN_LIFETIME_DAYS', 1))
    ),
    'ALGORITHM': 'HS256',
    'SIGNING_KEY': os.environ.get('JWT_SIGNING_KEY', SECRET_KEY),
    'AUTH_HEADER_TYPES': ('Bearer',),
}

# ==============================================================================
# CORS
# ==============================================================================
CORS_ALLOWED_ORIGINS = os.environ.get(
    'DJANGO_CORS_ALLOWED_ORIGINS',
    'http://localhost:3000'
).split(',')

CORS_ALLOW_CREDENTIALS = True

# ==============================================================================
# DRF SPECTACULAR (OpenAPI Schema)
# ==============================================================================
SPECTACULAR_SETTINGS = {
    'TITLE': 'Arijeem Insight 360 POS API',
    'DESCRIPTION': 'Beverage distribution POS: tiered pricing, sales and stock ledger',
    'VERSION': VERSION,
    'SERVE_INCLUDE_SCHEMA': False,
    'COMPONENT_SPLIT_REQUEST': True,
}

# ==============================================================================
# POS PRICING
# ==============================================================================
# Minimum quantity per product category at which the wholesale price applies.
# Override with POS_WHOLESALE_THRESHOLDS='{"can": 30, "water": 24}'.
POS_PRICING = {
    'WHOLESALE_THRESHOLDS': json.loads(os.environ.get(
        'POS_WHOLESALE_THRESHOLDS',
        '{"can": 30, "water": 24, "glass_bottle": 24, "plastic_bottle": 24}'
    )),
    'DEFAULT_WHOLESALE_THRESHOLD': int(os.environ.get('POS_DEFAULT_WHOLESALE_THRESHOLD', 24)),
    'PRICE_CORRECTION_TOLERANCE': int(os.environ.get('POS_PRICE_CORRECTION_TOLERANCE', 10)),
    'SALE_CONFLICT_MAX_ATTEMPTS': int(os.environ.get('POS_SALE_CONFLICT_MAX_ATTEMPTS', 3)),
}

POS_CURRENCY = os.environ.get('POS_CURRENCY', 'NGN')

# Authoritative price list keyed by SKU (whole naira).
# Stored product prices drifting from this list are corrected by reconcile_prices.
AUTHORITATIVE_PRICE_LIST = {
    # Water
    'NIRVANA-1L': {'retail': 1400, 'wholesale': 1300},
    'EVA-1.5L': {'retail': 3600, 'wholesale': 3600},
    'AQUAFINA-50CL': {'retail': 1700, 'wholesale': 1650},
    'AQUAFINA-75CL': {'retail': 2200, 'wholesale': 2150},

    # Returnable glass bottles
    'PEPSI-RGB': {'retail': 4500, 'wholesale': 4400},
    '7UP-RGB': {'retail': 3000, 'wholesale': 2950},
    'SK-RGB': {'retail': 3120, 'wholesale': 3050},
    'COKE-RGB-50CL': {'retail': 6000, 'wholesale': 6000},
    'COKE-ZERO-RGB': {'retail': 3200, 'wholesale': 3200},
    'COKE-RED-RGB': {'retail': 4400, 'wholesale': 4400},

    # PET (plastic)
    'CF-PET': {'retail': 4400, 'wholesale': 4400},
    'RAZZLE-40CL': {'retail': 2200, 'wholesale': 2100},
    'RAZZLE-60CL': {'retail': 3200, 'wholesale': 3100},
    'BIG-COLA-35CL': {'retail': 2100, 'wholesale': 2100},
    'C-FRUITY': {'retail': 2150, 'wholesale': 2150},
    'LACASERA-35CL': {'retail': 2300, 'wholesale': 2200},
    'AMERICAN-COLA': {'retail': 3700, 'wholesale': 3600},
    'SK-30CL': {'retail': 3000, 'wholesale': 3000},
    'SK-50CL': {'retail': 4300, 'wholesale': 4200},
    'PET-60CL': {'retail': 4250, 'wholesale': 4150},
    'PET-40CL': {'retail': 2320, 'wholesale': 2300},

    # Cans
    'DUBIC-CAN': {'retail': 12000, 'wholesale': 11000},
}

# ==============================================================================
# LOGGING
# ==============================================================================
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'filters': {
        'correlation': {
            '()': 'apps.core.observability.logging.CorrelationFilter',
        },
    },
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
        'json': {
            '()': 'apps.core.observability.logging.SanitizedJSONFormatter',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'json' if not DEBUG else 'verbose',
            'filters': ['correlation'],
        },
    },
    'root': {
        'handlers': ['console'],
        'level': os.environ.get('LOG_LEVEL', 'INFO'),
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': 'DEBUG' if DEBUG else 'INFO',
            'propagate': False,
        },
    },
}
