# backend/settings.py
from pathlib import Path
from decouple import AutoConfig
from datetime import timedelta
import os
import sys

BASE_DIR = Path(__file__).resolve().parent.parent
config = AutoConfig(search_path=BASE_DIR)

# Ensure repository root is in sys.path so `apps.*` packages are importable
REPO_ROOT = BASE_DIR.parent.parent.parent  # <repo>/
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

# ==========================================
# BASIC CONFIGURATION
# ==========================================
SECRET_KEY = config("SARRAF_SECRET_KEY", default="django-insecure-sarraf-dev-only")
DEBUG = config('DEBUG', default=False, cast=bool)
ALLOWED_HOSTS = config(
    'SARRAF_ALLOWED_HOSTS',
    default='*',
    cast=lambda v: [h.strip() for h in v.split(',') if h.strip()],
)
AUTH_USER_MODEL = 'clients.CustomUser'

# ==========================================
# DJANGO APPS
# ==========================================
DJANGO_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
]

THIRD_PARTY_APPS = [
    'corsheaders',
    'rest_framework',
    'rest_framework_simplejwt.token_blacklist',
    'django_extensions',  # runserver_plus, shell_plus
    'django_prometheus',
]

LOCAL_APPS = [
    'clients.apps.ClientsConfig',
    'api.apps.ApiConfig',
]

INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

# ==========================================
# REST FRAMEWORK
# ==========================================
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_THROTTLE_CLASSES': [
        'rest_framework.throttling.AnonRateThrottle',
        'rest_framework.throttling.UserRateThrottle'
    ],
    'DEFAULT_THROTTLE_RATES': {
        'anon': config('SARRAF_THROTTLE_ANON', default='100/hour'),
        'user': config('SARRAF_THROTTLE_USER', default='1000/hour'),
    },
    'TEST_REQUEST_DEFAULT_FORMAT': 'json',
}

# ==========================================
# JWT SETTINGS
# ==========================================
SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(hours=1),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=30),
    "ROTATE_REFRESH_TOKENS": True,
    "BLACKLIST_AFTER_ROTATION": True,
    "UPDATE_LAST_LOGIN": True,
    "ALGORITHM": "HS256",
    "AUTH_HEADER_TYPES": ("Bearer",),
    "AUTH_HEADER_NAME": "HTTP_AUTHORIZATION",
    "USER_ID_FIELD": "id",
    "USER_ID_CLAIM": "user_id",
    "AUTH_TOKEN_CLASSES": ("rest_framework_simplejwt.tokens.AccessToken",),
    "TOKEN_TYPE_CLAIM": "token_type",
    "JTI_CLAIM": "jti",
}

# ==========================================
# MIDDLEWARE
# ==========================================
MIDDLEWARE = [
    # Prometheus metrics - must be first
    'django_prometheus.middleware.PrometheusBeforeMiddleware',

    # Correlation ID - early for request tracking
    'api.middleware.correlation_id.CorrelationIDMiddleware',

    # Probe endpoints - bypass SSL redirect BEFORE SecurityMiddleware
    'api.middleware.correlation_id.ProbeNoRedirectMiddleware',

    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',

    # Prometheus metrics - must be last
    'django_prometheus.middleware.PrometheusAfterMiddleware',
]

ROOT_URLCONF = 'backend.urls'

# ==========================================
# TEMPLATES
# ==========================================
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

WSGI_APPLICATION = 'backend.wsgi.application'

# ==========================================
# DATABASES
# ==========================================
PG_DATABASE = config('SARRAF_PG_DATABASE', default='')

if PG_DATABASE:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': PG_DATABASE,
            'USER': config('SARRAF_PG_USER', default='sarraf'),
            'PASSWORD': config('SARRAF_PG_PASSWORD', default=''),
            'HOST': config('SARRAF_PG_HOST', default='localhost'),
            'PORT': config('SARRAF_PG_PORT', default='5432'),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

# ==========================================
# CACHE
# ==========================================
REDIS_URL = config("REDIS_URL", default="")

if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': REDIS_URL,
            'OPTIONS': {
                'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            },
            'TIMEOUT': 300,
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'sarraf-cache',
            'TIMEOUT': 300,
        }
    }

# ==========================================
# UPLOADED DOCUMENTS
# ==========================================
# Payment proofs and KYC documents go through default_storage
MEDIA_ROOT = config('SARRAF_MEDIA_ROOT', default=str(BASE_DIR / 'media'))
MEDIA_URL = 'media/'
DATA_UPLOAD_MAX_MEMORY_SIZE = 6 * 1024 * 1024

# ==========================================
# LOGGING
# ==========================================
LOG_DIR = Path(config('SARRAF_LOG_DIR', default=str(BASE_DIR / 'logs')))

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} [{correlation_id}] {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
        'json': {
            '()': 'pythonjsonlogger.jsonlogger.JsonFormatter',
            'format': '%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d %(funcName)s %(correlation_id)s',
        },
    },
    'filters': {
        'correlation_id': {
            '()': 'api.middleware.logging_filter.CorrelationIDFilter',
        },
    },
    'handlers': {
        'file': {
            'level': 'INFO',
            'class': 'logging.FileHandler',
            'filename': LOG_DIR / 'sarraf.log',
            'formatter': 'verbose',
            'filters': ['correlation_id'],
        },
        'console': {
            'level': 'DEBUG' if DEBUG else 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'simple' if DEBUG else 'json',  # JSON in production for log shipping
            'filters': ['correlation_id'],
        },
    },
    'loggers': {
        'api': {
            'handlers': ['file', 'console'],
            'level': 'INFO',
            'propagate': True,
        },
        'clients': {
            'handlers': ['file', 'console'],
            'level': 'INFO',
            'propagate': True,
        },
        'apps.backend.core': {
            'handlers': ['file', 'console'],
            'level': 'INFO',
            'propagate': True,
        },
        'rest_framework_simplejwt': {
            'handlers': ['file', 'console'],
            'level': 'WARNING',
            'propagate': True,
        },
    },
}

# Create logs directory if it doesn't exist
os.makedirs(LOG_DIR, exist_ok=True)

# ==========================================
# PASSWORD CONFIGURATION
# ==========================================
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',
    },
]

# ==========================================
# INTERNATIONALIZATION
# ==========================================
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# ==========================================
# STATIC FILES
# ==========================================
STATIC_ROOT = 'staticfiles'
STATIC_URL = 'static/'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ==========================================
# CORS CONFIGURATION
# ==========================================
if DEBUG:
    CORS_ALLOW_ALL_ORIGINS = True
    CORS_ALLOW_CREDENTIALS = True
else:
    CORS_ALLOWED_ORIGINS = config(
        'SARRAF_CORS_ORIGINS',
        default='',
        cast=lambda v: [o.strip() for o in v.split(',') if o.strip()],
    )
    CORS_ALLOW_CREDENTIALS = True

CORS_ALLOW_HEADERS = [
    'accept',
    'accept-encoding',
    'authorization',
    'content-type',
    'dnt',
    'origin',
    'user-agent',
    'x-csrftoken',
    'x-requested-with',
    'x-request-id',
]

CORS_EXPOSE_HEADERS = [
    'content-type',
    'x-request-id',
]

# ==========================================
# CSRF CONFIGURATION
# ==========================================
CSRF_TRUSTED_ORIGINS = config(
    'SARRAF_CSRF_TRUSTED_ORIGINS',
    default='http://localhost:5173,http://127.0.0.1:5173,http://localhost:8000',
    cast=lambda v: [o.strip() for o in v.split(',') if o.strip()],
)

# ==========================================
# SECURITY SETTINGS
# ==========================================
SECURE_SSL_REDIRECT = config('SARRAF_SSL_REDIRECT', default=False, cast=bool)
CSRF_COOKIE_HTTPONLY = True
CSRF_COOKIE_SAMESITE = 'Lax'
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'

if not DEBUG:
    CSRF_COOKIE_SECURE = True
    SESSION_COOKIE_SECURE = True
    SECURE_HSTS_SECONDS = 31536000
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_CONTENT_TYPE_NOSNIFF = True

# Trusted proxy header for HTTPS detection
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

# ==========================================
# DJANGO EXTENSIONS CONFIGURATION
# ==========================================
if DEBUG:
    SHELL_PLUS_PRINT_SQL = True
    SHELL_PLUS_IMPORTS = [
        'from clients.models import *',
        'from api.models import *',
        'from decimal import Decimal',
    ]

# ==========================================
# EXCHANGE CONFIGURATION
# ==========================================
# Rates are JOD per 1 USDT; commissions are fractions. These are only used
# until an admin saves a configuration through /api/admin/settings/payment/.
EXCHANGE = {
    'DEFAULT_RATES': {
        'buy_rate': config('SARRAF_DEFAULT_BUY_RATE', default='0.71'),
        'buy_commission_rate': config('SARRAF_DEFAULT_BUY_COMMISSION', default='0.02'),
        'sell_rate': config('SARRAF_DEFAULT_SELL_RATE', default='0.69'),
        'sell_commission_rate': config('SARRAF_DEFAULT_SELL_COMMISSION', default='0.02'),
    },
    'MAX_PROOF_SIZE': config('SARRAF_MAX_PROOF_SIZE', default=5 * 1024 * 1024, cast=int),
    'LOYALTY_POINT_DIVISOR': config('SARRAF_LOYALTY_POINT_DIVISOR', default=100, cast=int),
}

# ==========================================
# DEVELOPMENT SETTINGS
# ==========================================
if DEBUG:
    # Add database logging in development
    LOGGING['loggers']['django.db.backends'] = {
        'handlers': ['console'],
        'level': 'DEBUG',
        'propagate': False,
    }
