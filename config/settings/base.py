# config/settings/base.py
from pathlib import Path
import os
from dotenv import load_dotenv
from datetime import timedelta


BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "unsafe-dev-key")
DEBUG = os.getenv("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = ["*"]

INSTALLED_APPS = [
    # Django
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Third-party
    "corsheaders",
    "rest_framework",
    "rest_framework_simplejwt",
    "drf_spectacular",

    # Clinic-owned stores (read by the portal core)
    "portal_core.common.apps.CommonConfig",
    "portal_core.clinics.apps.ClinicsConfig",
    "portal_core.patients.apps.PatientsConfig",
    "portal_core.visits.apps.VisitsConfig",

    # Portal core
    "portal_core.identity.apps.IdentityConfig",
    "portal_core.consent.apps.ConsentConfig",
    "portal_core.audit.apps.AuditConfig",
    "portal_core.patient_auth.apps.PatientAuthConfig",
    "portal_core.history.apps.HistoryConfig",
]

MIDDLEWARE = [
    # ✅ Request id first so every log line below carries it
    "portal_core.common.middleware.RequestIdMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]


ROOT_URLCONF = "config.urls"

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
    }
]

WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DB_NAME", "portal"),
        "USER": os.getenv("DB_USER", "portal"),
        "PASSWORD": os.getenv("DB_PASSWORD", "portal"),
        "HOST": os.getenv("DB_HOST", "127.0.0.1"),
        "PORT": os.getenv("DB_PORT", "5432"),
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Doctor note blobs (the document store)
MEDIA_URL = "media/"
MEDIA_ROOT = Path(os.getenv("DJANGO_MEDIA_ROOT", BASE_DIR / "media"))

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "portal_core.patient_auth.auth.PatientCookieJWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "DEFAULT_SCHEMA_CLASS": "portal_core.common.openapi.PortalAutoSchema",

    # ✅ Standard error envelope
    "EXCEPTION_HANDLER": "portal_core.common.api.exceptions.api_exception_handler",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Patient Portal API",
    "DESCRIPTION": "Passcode login, cross-clinic identity, consent-gated visit history",
    "VERSION": "0.1.0",

    "COMPONENT_SPLIT_REQUEST": True,
    "SORT_OPERATIONS": True,
    "SORT_OPERATION_PARAMETERS": True,

    # Declared by PatientCookieJWTAuthenticationScheme (portal_core/patient_auth/openapi.py)
    "SECURITY": [
        {"PatientBearerOrCookieJWT": []}
    ],

    # Remove legacy /api/* endpoints, keep /api/v1/*
    "PREPROCESSING_HOOKS": [
        "portal_core.common.openapi.preprocess_primary_api_only",
    ],
}

# Patient tokens are signed with these (HS256 + SECRET_KEY).
SIMPLE_JWT = {
    "ALGORITHM": "HS256",
    "SIGNING_KEY": SECRET_KEY,
    "AUTH_HEADER_TYPES": ("Bearer",),
    "TOKEN_TYPE_CLAIM": "token_type",
    "JTI_CLAIM": "jti",
}

PATIENT_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=15),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=30),

    # Cookie settings
    "AUTH_COOKIE": "patient_access_token",
    "AUTH_COOKIE_REFRESH": "patient_refresh_token",
    "AUTH_COOKIE_SECURE": os.getenv("PATIENT_COOKIE_SECURE", "1") == "1",
    "AUTH_COOKIE_SAMESITE": "Strict",
}

PATIENT_PASSCODE = {
    "TTL": timedelta(minutes=5),
    "RATE_LIMIT": 5,
    "RATE_WINDOW": timedelta(minutes=60),

    # Test environments only; refused at startup when DJANGO_ENV=prod
    "BYPASS_ENABLED": os.getenv("PATIENT_PASSCODE_BYPASS", "0") == "1",
    "BYPASS_CODE": os.getenv("PATIENT_PASSCODE_BYPASS_CODE", ""),
}

PATIENT_ACCESS_LOG = {
    "ASYNC": True,
    "QUEUE_SIZE": 1000,
}

PATIENT_HISTORY = {
    "DEFAULT_PAGE_SIZE": 20,
    "MAX_PAGE_SIZE": 50,
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_id": {"()": "portal_core.common.middleware.RequestIdFilter"},
    },
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "filters": ["request_id"],
            "formatter": "standard",
        },
    },
    "root": {"handlers": ["console"], "level": os.getenv("DJANGO_LOG_LEVEL", "INFO")},
    "loggers": {
        "portal_core": {"level": os.getenv("PORTAL_LOG_LEVEL", "INFO"), "propagate": True},
    },
}

# CORS settings
# Development
CORS_ALLOW_ALL_ORIGINS = True  # Only for development!
CORS_ALLOW_CREDENTIALS = True
