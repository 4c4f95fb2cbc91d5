# Django 기동 시 Celery app 로드 (shared_task가 이 app에 바인딩되도록)
from .celery import app as celery_app

__all__ = ["celery_app"]
