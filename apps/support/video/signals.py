# PATH: apps/support/video/signals.py
from __future__ import annotations

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.support.video.models import Video
from apps.support.video.services.dispatch import dispatch_production_jobs


@receiver(post_save, sender=Video)
def dispatch_jobs_on_create(sender, instance: Video, created: bool, **kwargs):
    """생성 시 1회: commit 이후 4개 작업 enqueue (worker가 row를 볼 수 있도록)"""
    if not created:
        return

    video_id = instance.id
    transaction.on_commit(lambda: dispatch_production_jobs(video_id))
