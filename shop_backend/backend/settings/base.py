"""
PATH: backend/settings/base.py

BASE SETTINGS (shared by dev + prod + test)

Operational maturity:
- Throttling
- Sentry (optional): error visibility in production
- Ledger tuning: lock timeout, low-stock threshold, history/bulk-import limits
- Structured console logging (request id aware)
"""

from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

import environ
from corsheaders.defaults import default_headers, default_methods

# -----------------------------------------
# BASE DIRECTORY
# -----------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# -----------------------------------------
# TEST MODE DETECTION
# -----------------------------------------
TESTING = "test" in sys.argv

# -----------------------------------------
# ENV (django-environ)
# -----------------------------------------
env = environ.Env(
    DEBUG=(bool, True),
    SECRET_KEY=(str, ""),
    TIME_ZONE=(str, "UTC"),
    ALLOWED_HOSTS=(list, ["localhost", "127.0.0.1"]),
    CORS_ALLOWED_ORIGINS=(list, ["http://localhost:8081"]),
    CSRF_TRUSTED_ORIGINS=(list, ["http://localhost:8081"]),
    DATABASE_URL=(str, f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
    LOG_LEVEL=(str, "INFO"),
    ADMIN_PATH=(str, "admin/"),
    # Throttling
    THROTTLE_ANON_RATE=(str, "60/min"),
    THROTTLE_USER_RATE=(str, "600/min"),
    # Ledger
    LEDGER_LOCK_TIMEOUT_MS=(int, 5000),
    LOW_STOCK_THRESHOLD=(int, 5),
    STOCK_HISTORY_DEFAULT_LIMIT=(int, 10),
    STOCK_HISTORY_MAX_LIMIT=(int, 100),
    BULK_IMPORT_MAX_ITEMS=(int, 500),
    # Sentry (optional; enable by setting SENTRY_DSN)
    SENTRY_DSN=(str, ""),
    SENTRY_ENVIRONMENT=(str, "development"),
    SENTRY_TRACES_SAMPLE_RATE=(float, 0.0),
    SENTRY_SEND_PII=(bool, False),
)

# -----------------------------------------
# LOAD .env
# -----------------------------------------
env_file_1 = BASE_DIR / ".env"
env_file_2 = BASE_DIR.parent / ".env"

if env_file_1.exists():
    env.read_env(str(env_file_1))
elif env_file_2.exists():
    env.read_env(str(env_file_2))

# -----------------------------------------
# CORE SECURITY
# -----------------------------------------
SECRET_KEY = (env("SECRET_KEY") or "dev-insecure-change-me").strip()
DEBUG = env.bool("DEBUG")
ALLOWED_HOSTS = env.list("ALLOWED_HOSTS")
ADMIN_PATH = env("ADMIN_PATH")

# -----------------------------------------
# I18N / TZ
# -----------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = (env("TIME_ZONE") or "UTC").strip()
USE_I18N = True
USE_TZ = True

# -----------------------------------------
# AUTH USER MODEL (custom)
# -----------------------------------------
AUTH_USER_MODEL = "users.User"

# -----------------------------------------
# INSTALLED APPS
# -----------------------------------------
INSTALLED_APPS = [
    "corsheaders",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "rest_framework_simplejwt",
    "drf_spectacular",
    "django_filters",
    "users.apps.UsersConfig",
    "shops.apps.ShopsConfig",
    "products.apps.ProductsConfig",
    "inventory.apps.InventoryConfig",
    "purchases.apps.PurchasesConfig",
    "sales.apps.SalesConfig",
]

# -----------------------------------------
# MIDDLEWARE
# -----------------------------------------
MIDDLEWARE = [
    "backend.middleware.RequestIdMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "backend.urls"
WSGI_APPLICATION = "backend.wsgi.application"
APPEND_SLASH = True

# -----------------------------------------
# TEMPLATES (required for Django admin)
# -----------------------------------------
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [str(BASE_DIR / "templates")],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

# -----------------------------------------
# REST FRAMEWORK
# -----------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework_simplejwt.authentication.JWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": ("rest_framework.permissions.IsAuthenticated",),
    "DEFAULT_FILTER_BACKENDS": ("django_filters.rest_framework.DjangoFilterBackend",),
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_THROTTLE_CLASSES": (
        "rest_framework.throttling.AnonRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
    ),
    "DEFAULT_THROTTLE_RATES": {
        "anon": env("THROTTLE_ANON_RATE"),
        "user": env("THROTTLE_USER_RATE"),
    },
}

# -----------------------------------------
# SIMPLE JWT
# -----------------------------------------
SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=30),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=1),
    "ROTATE_REFRESH_TOKENS": True,
    "USER_ID_FIELD": "id",
}

# -----------------------------------------
# DATABASE
# -----------------------------------------
DATABASES = {
    "default": env.db("DATABASE_URL"),
}

# -----------------------------------------
# INVENTORY LEDGER
# -----------------------------------------
# lock_timeout applied per ledger transaction (PostgreSQL only).
LEDGER_LOCK_TIMEOUT_MS = env.int("LEDGER_LOCK_TIMEOUT_MS")
LOW_STOCK_THRESHOLD = env.int("LOW_STOCK_THRESHOLD")
STOCK_HISTORY_DEFAULT_LIMIT = env.int("STOCK_HISTORY_DEFAULT_LIMIT")
STOCK_HISTORY_MAX_LIMIT = env.int("STOCK_HISTORY_MAX_LIMIT")
BULK_IMPORT_MAX_ITEMS = env.int("BULK_IMPORT_MAX_ITEMS")

# -----------------------------------------
# LOGGING
# -----------------------------------------
LOG_LEVEL = (env("LOG_LEVEL") or "INFO").strip().upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_id": {"()": "backend.middleware.RequestIdLogFilter"},
    },
    "formatters": {
        "console": {
            "format": "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "filters": ["request_id"],
        },
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        "django.db.backends": {"level": "WARNING"},
        "inventory": {"level": LOG_LEVEL, "propagate": True},
        "purchases": {"level": LOG_LEVEL, "propagate": True},
        "sales": {"level": LOG_LEVEL, "propagate": True},
    },
}

# -----------------------------------------
# SENTRY (optional)
# -----------------------------------------
SENTRY_DSN = (env("SENTRY_DSN") or "").strip()
SENTRY_ENVIRONMENT = (env("SENTRY_ENVIRONMENT") or "development").strip()
SENTRY_TRACES_SAMPLE_RATE = float(env("SENTRY_TRACES_SAMPLE_RATE"))
SENTRY_SEND_PII = env.bool("SENTRY_SEND_PII")

if SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=SENTRY_ENVIRONMENT,
        integrations=[DjangoIntegration()],
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=SENTRY_SEND_PII,
    )

# -----------------------------------------
# CORS / CSRF
# -----------------------------------------
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS")
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_METHODS = list(default_methods)
CORS_ALLOW_HEADERS = [*default_headers, "x-shop-id", "x-request-id"]
CORS_EXPOSE_HEADERS = ["x-request-id"]

CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS")

# -----------------------------------------
# STATIC FILES
# -----------------------------------------
STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------------------
# SWAGGER
# -----------------------------------------
SPECTACULAR_SETTINGS = {
    "TITLE": "Shop Backend API",
    "DESCRIPTION": "Inventory ledger, purchases and sales for multi-shop retail",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}
