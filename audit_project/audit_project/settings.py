from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from .env (if present)
load_dotenv(BASE_DIR / ".env")


def _getenv(name: str, default: str | None = None) -> str:
    val = os.getenv(name)
    if val is None:
        return "" if default is None else default
    return str(val)


def _getenv_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return str(raw).strip().lower() in {"1", "true", "yes", "y", "on"}


def _getenv_int(name: str, default: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def _getenv_list(name: str) -> list[str]:
    return [v.strip() for v in _getenv(name, "").split(",") if v.strip()]


SECRET_KEY = _getenv("SECRET_KEY", "django-insecure-CHANGE_ME")
DEBUG = _getenv_bool("DEBUG", False)

ALLOWED_HOSTS = _getenv_list("ALLOWED_HOSTS") or ["localhost", "127.0.0.1"]


# ============================================================
# APPLICATIONS
# ============================================================
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Project apps
    "accounts",
    "audits",
    "audit_settings",
    "notifications",
]

AUTH_USER_MODEL = "accounts.User"

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "audit_project.urls"

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
    }
]

WSGI_APPLICATION = "audit_project.wsgi.application"


# ============================================================
# DATABASE
# ============================================================
# SQLite by default; PostgreSQL when POSTGRES_DB is set.
# Both carry connect and statement timeouts.
DB_STATEMENT_TIMEOUT_MS = _getenv_int("DB_STATEMENT_TIMEOUT_MS", 15000)

if _getenv("POSTGRES_DB"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": _getenv("POSTGRES_DB"),
            "USER": _getenv("POSTGRES_USER", "audit"),
            "PASSWORD": _getenv("POSTGRES_PASSWORD", ""),
            "HOST": _getenv("POSTGRES_HOST", "localhost"),
            "PORT": _getenv("POSTGRES_PORT", "5432"),
            "CONN_MAX_AGE": _getenv_int("DB_CONN_MAX_AGE", 0),
            "OPTIONS": {
                "connect_timeout": _getenv_int("DB_CONNECT_TIMEOUT", 10),
                "options": f"-c statement_timeout={DB_STATEMENT_TIMEOUT_MS}",
            },
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
            "OPTIONS": {
                "timeout": _getenv_int("DB_CONNECT_TIMEOUT", 10),
            },
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# ============================================================
# INTERNATIONALIZATION
# ============================================================
LANGUAGE_CODE = "en-us"
TIME_ZONE = _getenv("TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"


# ============================================================
# EMAIL (SMTP)
# ============================================================
EMAIL_BACKEND = _getenv(
    "EMAIL_BACKEND", "django.core.mail.backends.smtp.EmailBackend"
)
EMAIL_HOST = _getenv("EMAIL_HOST", "smtp.gmail.com")
EMAIL_PORT = _getenv_int("EMAIL_PORT", 465)
EMAIL_USE_SSL = _getenv_bool("EMAIL_USE_SSL", True)
EMAIL_USE_TLS = _getenv_bool("EMAIL_USE_TLS", False)
EMAIL_HOST_USER = _getenv("SMTP_USERNAME")
EMAIL_HOST_PASSWORD = _getenv("SMTP_PASSWORD")
EMAIL_TIMEOUT = _getenv_int("EMAIL_TIMEOUT", 20)

AUDIT_ORGANIZATION_NAME = _getenv("AUDIT_ORGANIZATION_NAME", "Sarvagaya Institute")
DEFAULT_FROM_EMAIL = _getenv(
    "DEFAULT_FROM_EMAIL",
    f"{AUDIT_ORGANIZATION_NAME} <{EMAIL_HOST_USER or 'noreply@localhost'}>",
)
SERVER_EMAIL = DEFAULT_FROM_EMAIL

# Operators alerted when the reminder job itself keeps failing.
ADMINS = [("Ops", addr) for addr in _getenv_list("ADMIN_EMAILS")]

# Public client base URL for assets/links in emails (e.g. https://app.example.com)
AUDIT_CLIENT_URL = _getenv("CLIENT_URL", "")


# ============================================================
# TARGET AUDIT REMINDERS
# ============================================================
ENABLE_SCHEDULER = _getenv_bool("ENABLE_SCHEDULER", False)

TARGET_AUDIT_REMINDER_INTERVAL_SECONDS = _getenv_int(
    "TARGET_AUDIT_REMINDER_INTERVAL_SECONDS", 10
)
TARGET_AUDIT_REMINDER_SAFETY_OFFSET_SECONDS = _getenv_int(
    "TARGET_AUDIT_REMINDER_SAFETY_OFFSET_SECONDS", 15
)
TARGET_AUDIT_STAGNATION_THRESHOLD = _getenv_int(
    "TARGET_AUDIT_STAGNATION_THRESHOLD", 2
)
TARGET_AUDIT_EMAIL_TIMEOUT = _getenv_int("TARGET_AUDIT_EMAIL_TIMEOUT", EMAIL_TIMEOUT)
TARGET_AUDIT_LISTING_FAILURE_ALERT_THRESHOLD = _getenv_int(
    "TARGET_AUDIT_LISTING_FAILURE_ALERT_THRESHOLD", 3
)
TARGET_AUDIT_SHUTDOWN_GRACE_SECONDS = _getenv_int(
    "TARGET_AUDIT_SHUTDOWN_GRACE_SECONDS", 30
)


# ============================================================
# LOGGING
# ============================================================
LOG_LEVEL = _getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "accounts": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "notifications": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "apscheduler": {"handlers": ["console"], "level": "WARNING", "propagate": False},
    },
}
