# PATH: apps/support/video/services/engagement.py
from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.support.realtime.channels import video_channel
from apps.support.video.constants import VideoEvent
from apps.support.video.models import Video
from src.application.ports.event_bus import EventBusError, IEventBus

logger = logging.getLogger(__name__)


def like_video(video_id: int, *, bus: IEventBus) -> int:
    """likes +1 → video.<id> 에 liked. 반환: 변경 후 likes"""
    return _apply_like_delta(video_id, 1, VideoEvent.LIKED, bus)


def dislike_video(video_id: int, *, bus: IEventBus) -> int:
    """likes -1 → video.<id> 에 disliked. 하한 없음 (음수 허용)"""
    return _apply_like_delta(video_id, -1, VideoEvent.DISLIKED, bus)


def _apply_like_delta(video_id: int, delta: int, event: str, bus: IEventBus) -> int:
    video_id = int(video_id)

    # read-modify-write 금지: DB에서 likes = likes + delta
    with transaction.atomic():
        updated = Video.objects.filter(pk=video_id).update(
            likes=F("likes") + delta,
            updated_at=timezone.now(),
        )
        if not updated:
            raise Video.DoesNotExist(f"Video {video_id} not found")
        likes = Video.objects.values_list("likes", flat=True).get(pk=video_id)
        # commit 이후 발행 (바깥 transaction이 rollback 되면 발행 없음)
        transaction.on_commit(lambda: _emit(bus, video_id, event))

    return likes


def _emit(bus: IEventBus, video_id: int, event: str) -> None:
    try:
        bus.publish(video_channel(video_id), {"event": event})
    except EventBusError:
        logger.exception("ENGAGEMENT_EVENT_FAILED video_id=%s event=%s", video_id, event)
