# apps/api/celery.py

import logging

from celery import Celery
from celery.signals import worker_ready

logger = logging.getLogger(__name__)

# ❗ settings는 여기서 지정하지 않는다
# DJANGO_SETTINGS_MODULE은 반드시 외부에서 주입

app = Celery("videohub")

app.config_from_object(
    "django.conf:settings",
    namespace="CELERY",
)

# ✅ Django INSTALLED_APPS 기준으로 자동 탐색
app.autodiscover_tasks()


@worker_ready.connect
def bootstrap_realtime_grants_on_start(sender=None, **kwargs):
    """
    워커 기동 시 1회: Event Bus 기본 권한(video.* 공개 읽기, 서비스 키 rw) 부여.
    실패해도 워커 기동은 막지 않는다.
    """
    from django.conf import settings

    from apps.support.realtime.bus import get_event_bus
    from apps.support.realtime.grants import bootstrap_grants

    try:
        bootstrap_grants(get_event_bus(), service_auth_key=settings.REALTIME_SERVICE_AUTH_KEY)
    except Exception:
        logger.exception("REALTIME_BOOTSTRAP_FAILED")
