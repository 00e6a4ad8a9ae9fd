"""
Base settings for the clinic eBarimt project.
Environment-specific overrides live in settings_production.py.

POSAPI values are read from the environment here, once, at start-up.
Services never read the environment themselves; they receive a PosApiConfig
built from these settings (see ebarimt.services.config).
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


SECRET_KEY = os.environ.get("SECRET_KEY", "django-insecure-dev-only-change-me")
DEBUG = _env_bool("DEBUG", "true")
ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "rest_framework_simplejwt",
    "billing",
    "ebarimt",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "clinic_project.jwt_middleware.JWTAuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "clinic_project.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "clinic_project.wsgi.application"
ASGI_APPLICATION = "clinic_project.asgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "Asia/Ulaanbaatar")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework_simplejwt.authentication.JWTAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ),
}

# Celery (eBarimt issuance can be dispatched off the request by settlement callers)
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_TASK_ALWAYS_EAGER = _env_bool("CELERY_TASK_ALWAYS_EAGER", "false")

# POSAPI 3.0 (eBarimt)
POSAPI_BASE_URL = os.environ.get("POSAPI_BASE_URL", "http://localhost:7080")
POSAPI_TIMEOUT = int(os.environ.get("POSAPI_TIMEOUT", "15000") or "15000")  # ms
POSAPI_GET_RETRIES = int(os.environ.get("POSAPI_GET_RETRIES", "2") or "0")
POSAPI_MERCHANT_TIN = os.environ.get("POSAPI_MERCHANT_TIN", "")
POSAPI_POS_NO = os.environ.get("POSAPI_POS_NO", "")
POSAPI_BRANCH_NO = os.environ.get("POSAPI_BRANCH_NO", "")
POSAPI_DISTRICT_CODE = os.environ.get("POSAPI_DISTRICT_CODE", "") or "34"
POSAPI_CONSUMER_NO = os.environ.get("POSAPI_CONSUMER_NO", "")
POSAPI_OPERATOR_TOKEN = os.environ.get("POSAPI_OPERATOR_TOKEN", "")
POSAPI_OPERATOR_API_KEY = os.environ.get("POSAPI_OPERATOR_API_KEY", "")
POSAPI_OPERATOR_BASE_URL = os.environ.get(
    "POSAPI_OPERATOR_BASE_URL",
    "https://api.ebarimt.mn/api/tpi/receipt/saveOprMerchants",
)
EBARIMT_SKIP = _env_bool("EBARIMT_SKIP", "false")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
        "json": {
            "()": "ebarimt.logging_formatter.JSONFormatter",
        },
    },
    "handlers": {
        "console": {
            "level": "INFO",
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "ebarimt": {
            "handlers": ["console"],
            "level": os.environ.get("EBARIMT_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
