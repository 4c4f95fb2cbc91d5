# PATH: apps/api/config/settings/test.py
from .base import *

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# 브로커 없이 .delay() 가능 (메시지는 프로세스 메모리에만 쌓임)
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = None
CELERY_TASK_ALWAYS_EAGER = False

EVENT_BUS_BACKEND = "memory"
REALTIME_SERVICE_AUTH_KEY = "test-service-auth-key"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "root": {"level": "WARNING"},
}
