import os
from pathlib import Path

from django.core.exceptions import ImproperlyConfigured

from feesplit.config import (
    build_databases,
    env_bool,
    env_choice,
    env_float,
    env_int,
    env_list,
    load_environment,
)

BASE_DIR = Path(__file__).resolve().parent.parent
load_environment(BASE_DIR)

DEBUG = env_bool("DEBUG", default=True)

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "")
if not SECRET_KEY:
    if DEBUG:
        SECRET_KEY = "dev-only-secret-key"
    else:
        raise ImproperlyConfigured("DJANGO_SECRET_KEY must be set when DEBUG=False")

ALLOWED_HOSTS = env_list("ALLOWED_HOSTS", ["127.0.0.1", "localhost", "testserver"])
if not DEBUG and not ALLOWED_HOSTS:
    raise ImproperlyConfigured("ALLOWED_HOSTS must be set when DEBUG=False")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "ledger",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "feesplit.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "feesplit.wsgi.application"

DATABASE_URL, DATABASES = build_databases(BASE_DIR)

if not DEBUG and not DATABASE_URL and not os.getenv("DB_NAME"):
    raise ImproperlyConfigured("Set DATABASE_URL or DB_NAME when DEBUG=False")

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "EXCEPTION_HANDLER": "ledger.api.exceptions.custom_exception_handler",
}

# Ledger accounting rules.
LEDGER_DENOM = os.getenv("LEDGER_DENOM", "usei")
LEDGER_FEE_MODE = env_choice("LEDGER_FEE_MODE", "accrue", {"accrue", "payout"})
LEDGER_REJECT_INIT_FUNDS = env_bool("LEDGER_REJECT_INIT_FUNDS", default=True)
LEDGER_ADDRESS_PREFIX = os.getenv("LEDGER_ADDRESS_PREFIX", "")
LEDGER_ADDRESS_VALIDATOR = os.getenv(
    "LEDGER_ADDRESS_VALIDATOR", "ledger.domain.policies.validate_address_format"
)
LEDGER_CONTRACT_NAME = os.getenv("LEDGER_CONTRACT_NAME", "feesplit-1-to-2-transfer")
LEDGER_CONTRACT_VERSION = os.getenv("LEDGER_CONTRACT_VERSION", "0.1.0")

if not LEDGER_DENOM.strip():
    raise ImproperlyConfigured("LEDGER_DENOM cannot be empty")

# Settlement layer that executes outbound payment instructions.
SETTLEMENT_BASE_URL = os.getenv("SETTLEMENT_BASE_URL", "http://127.0.0.1:8020")
SETTLEMENT_TIMEOUT = env_float("SETTLEMENT_TIMEOUT", default=3.0)
SETTLEMENT_RETRY_MAX_ATTEMPTS = env_int("SETTLEMENT_RETRY_MAX_ATTEMPTS", default=3)
SETTLEMENT_RETRY_BASE_DELAY = env_float("SETTLEMENT_RETRY_BASE_DELAY", default=0.2)
SETTLEMENT_RETRY_MAX_DELAY = env_float("SETTLEMENT_RETRY_MAX_DELAY", default=2.0)
SETTLEMENT_MAX_ATTEMPTS = env_int("SETTLEMENT_MAX_ATTEMPTS", default=5)
SETTLEMENT_HTTP_MAX_CONNECTIONS = env_int("SETTLEMENT_HTTP_MAX_CONNECTIONS", default=10)
SETTLEMENT_HTTP_MAX_KEEPALIVE = env_int("SETTLEMENT_HTTP_MAX_KEEPALIVE", default=10)
SETTLEMENT_PROCESSING_STALE_SECONDS = env_int(
    "SETTLEMENT_PROCESSING_STALE_SECONDS", default=60
)

if SETTLEMENT_TIMEOUT <= 0:
    raise ImproperlyConfigured("SETTLEMENT_TIMEOUT must be greater than zero")
if SETTLEMENT_RETRY_MAX_ATTEMPTS < 1:
    raise ImproperlyConfigured("SETTLEMENT_RETRY_MAX_ATTEMPTS must be >= 1")
if SETTLEMENT_RETRY_BASE_DELAY < 0 or SETTLEMENT_RETRY_MAX_DELAY < 0:
    raise ImproperlyConfigured("SETTLEMENT_RETRY_*_DELAY must be >= 0")
if SETTLEMENT_MAX_ATTEMPTS < 1:
    raise ImproperlyConfigured("SETTLEMENT_MAX_ATTEMPTS must be >= 1")
if SETTLEMENT_PROCESSING_STALE_SECONDS < 1:
    raise ImproperlyConfigured("SETTLEMENT_PROCESSING_STALE_SECONDS must be >= 1")

WORKER_LOOP_INTERVAL = env_float("WORKER_LOOP_INTERVAL", default=5.0)
WORKER_LOOP_JITTER_MAX = env_float("WORKER_LOOP_JITTER_MAX", default=1.0)

if WORKER_LOOP_INTERVAL < 0:
    raise ImproperlyConfigured("WORKER_LOOP_INTERVAL must be >= 0")
if WORKER_LOOP_JITTER_MAX < 0:
    raise ImproperlyConfigured("WORKER_LOOP_JITTER_MAX must be >= 0")

LOG_LEVEL = os.getenv("LEDGER_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "structured": {
            "format": (
                '{"ts":"%(asctime)s","level":"%(levelname)s",'
                '"logger":"%(name)s","message":"%(message)s"}'
            ),
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "structured",
        },
    },
    "loggers": {
        "ledger": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}
