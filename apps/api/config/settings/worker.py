# apps/api/config/settings/worker.py

from .base import *
import os

# 워커는 URLConf 불필요
ROOT_URLCONF = None

DEBUG = False

# ==================================================
# Celery (워커 필수)
# ==================================================

CELERY_BROKER_URL = os.environ["CELERY_BROKER_URL"]
CELERY_RESULT_BACKEND = os.environ["CELERY_RESULT_BACKEND"]

# ==================================================
# Realtime (워커도 publish 하므로 필수)
# ==================================================

EVENT_BUS_REDIS_URL = os.environ["EVENT_BUS_REDIS_URL"]
REALTIME_SERVICE_AUTH_KEY = os.environ["REALTIME_SERVICE_AUTH_KEY"]
