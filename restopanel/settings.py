"""
Django settings for the RestoPanel admin panel.

Everything environment specific is read from RESTOPANEL_* environment
variables. The panel keeps no database: business data comes from the
remote restaurant API and sessions live in the cache.
"""
from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("RESTOPANEL_SECRET_KEY", "django-insecure-restopanel-dev-key")

DEBUG = _env_bool("RESTOPANEL_DEBUG", True)

ALLOWED_HOSTS = [h.strip() for h in os.environ.get("RESTOPANEL_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]


# Application definition

INSTALLED_APPS = [
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "apps.accounts",
    "apps.scheduling",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "restopanel.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
                "apps.accounts.context_processors.user_ui_context",
            ],
        },
    },
]

WSGI_APPLICATION = "restopanel.wsgi.application"

# No local persistence: the restaurant API owns all records.
DATABASES = {}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "restopanel",
    }
}

SESSION_ENGINE = "django.contrib.sessions.backends.cache"
MESSAGE_STORAGE = "django.contrib.messages.storage.session.SessionStorage"


# Internationalization

LANGUAGE_CODE = "en-us"

# "Today" in the calendar is the local date in this zone.
TIME_ZONE = os.environ.get("RESTOPANEL_TIME_ZONE", "UTC")

USE_I18N = True

USE_TZ = True


# Static files (CSS, JavaScript, Images)

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"


# Remote restaurant API

RESTOPANEL_API = {
    "BASE_URL": os.environ.get("RESTOPANEL_API_BASE_URL", "http://127.0.0.1:8000/api"),
    "TIMEOUT": float(os.environ.get("RESTOPANEL_API_TIMEOUT", "10")),
}

# Seconds a loaded calendar dataset is reused for the same session and reload key.
RESTOPANEL_CALENDAR_CACHE_TIMEOUT = int(os.environ.get("RESTOPANEL_CALENDAR_CACHE_TIMEOUT", "300"))


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "apps": {
            "handlers": ["console"],
            "level": os.environ.get("RESTOPANEL_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
