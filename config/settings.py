"""
Entity IDs – Django Settings (Infrastructure Only)
==================================================
Django serves as the framework container for the display-ID editor API.
The entity_ids packages are the authority; Django does not dictate structure.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
# BASE_DIR = project root
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get(
    "ENTITY_IDS_SECRET_KEY",
    "entity-ids-dev-key-replace-before-deployment",
)

DEBUG = os.environ.get("ENTITY_IDS_DEBUG", "1") == "1"

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "entity_ids.catalog_store",
]

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL & WSGI ────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# ── Entity catalog backend ────────────────────────────────────
# "db" reads/writes entity_ids.catalog_store; "memory" is a seeded
# in-process catalog for smoke runs.
ENTITY_IDS_CATALOG = os.environ.get("ENTITY_IDS_CATALOG", "db")

# ── API keys ──────────────────────────────────────────────────
# {api_key: [business_id, ...]}. None falls back to the single dev key
# bound to the dev business (adapters.django_api.wiring).
ENTITY_IDS_API_KEYS = None

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "entity_ids": {
            "handlers": ["console"],
            "level": os.environ.get("ENTITY_IDS_LOG_LEVEL", "INFO"),
        },
    },
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# ── Default Primary Key ──────────────────────────────────────
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
