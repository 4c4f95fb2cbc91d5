from .base import *
import os

DEBUG = True
ALLOWED_HOSTS = ["*"]

# 로컬에서는 Redis 없이도 돌아가도록 memory bus (발행 내용은 로그로만 확인)
EVENT_BUS_BACKEND = os.getenv("EVENT_BUS_BACKEND", "memory")
REALTIME_SERVICE_AUTH_KEY = os.getenv("REALTIME_SERVICE_AUTH_KEY", "dev-service-auth-key")

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}
