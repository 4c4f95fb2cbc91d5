# PATH: apps/api/config/settings/prod.py
from .base import *
import os

# ==================================================
# PROD MODE
# ==================================================

DEBUG = False

SECRET_KEY = os.environ["DJANGO_SECRET_KEY"]

ALLOWED_HOSTS = [
    h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()
]

# ==================================================
# REALTIME
# ==================================================
# ❌ memory bus 금지 (이벤트가 구독자에게 전달되지 않음)

EVENT_BUS_BACKEND = "redis"
REALTIME_SERVICE_AUTH_KEY = os.environ["REALTIME_SERVICE_AUTH_KEY"]

if not REALTIME_SERVICE_AUTH_KEY:
    raise RuntimeError("REALTIME_SERVICE_AUTH_KEY must be set in prod.")
