# PATH: apps/api/config/settings/base.py

from pathlib import Path
import os

# ==================================================
# BASE
# ==================================================

BASE_DIR = Path(__file__).resolve().parents[4]

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-secret-key")
DEBUG = True
ALLOWED_HOSTS = ["*"]

AUTH_USER_MODEL = "core.User"


# ==================================================
# INSTALLED APPS
# ==================================================

INSTALLED_APPS = [
    # Django
    "django.contrib.auth",
    "django.contrib.contenttypes",

    # Core (User)
    "apps.core.apps.CoreConfig",

    # support
    "apps.support.realtime.apps.RealtimeConfig",
    "apps.support.video.apps.VideoConfig",

    # shared 여기에 등록해야 워커에서 줏어감.
    "apps.shared",
]

# ==================================================
# DATABASE
# ==================================================

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DB_NAME"),
        "USER": os.getenv("DB_USER"),
        "PASSWORD": os.getenv("DB_PASSWORD"),
        "HOST": os.getenv("DB_HOST"),
        "PORT": os.getenv("DB_PORT", "5432"),
    }
}

# ==================================================
# GLOBAL
# ==================================================

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("TIME_ZONE", "UTC")

USE_I18N = True
USE_TZ = True

MEDIA_URL = "/media/"
MEDIA_ROOT = Path(os.getenv("MEDIA_ROOT", str(BASE_DIR / "storage" / "media")))

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ==================================================
# CELERY / REDIS
# ==================================================

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"

CELERY_TASK_DEFAULT_QUEUE = "default"

CELERY_TIMEZONE = TIME_ZONE

# at-least-once: worker가 죽으면 메시지는 재전달된다 (job body는 멱등이어야 함)
CELERY_TASK_ACKS_LATE = True
CELERY_TASK_REJECT_ON_WORKER_LOST = True
CELERY_WORKER_PREFETCH_MULTIPLIER = 1

CELERY_TASK_ROUTES = {
    "media.*": {"queue": "video"},
}

# ==================================================
# COMPLETION SWEEPER (publish 대상 탐지)
# ==================================================

VIDEO_SWEEP_INTERVAL_SECONDS = float(os.getenv("VIDEO_SWEEP_INTERVAL_SECONDS", "60"))

CELERY_BEAT_SCHEDULE = {
    "sweep-unpublished-videos": {
        "task": "media.sweep_unpublished",
        "schedule": VIDEO_SWEEP_INTERVAL_SECONDS,
    },
}

# ==================================================
# REALTIME (Event Bus)
# ==================================================
# - EVENT_BUS_BACKEND: "redis" (운영) | "memory" (개발/테스트, 로그만)
# - REALTIME_SERVICE_AUTH_KEY: 서비스 자신의 publish 자격 증명

EVENT_BUS_BACKEND = os.getenv("EVENT_BUS_BACKEND", "redis")
EVENT_BUS_REDIS_URL = os.getenv("EVENT_BUS_REDIS_URL", "redis://localhost:6379/2")
REALTIME_SERVICE_AUTH_KEY = os.getenv("REALTIME_SERVICE_AUTH_KEY", "")

# ==================================================
# LOGGING
# ==================================================

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "[{levelname}] {asctime} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.getenv("LOG_LEVEL", "INFO"),
    },
}
