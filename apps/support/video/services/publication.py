# PATH: apps/support/video/services/publication.py
"""
Publication Engine

1) published false → true 조건부 UPDATE (compare-and-set)
   WHERE id=? AND published=false AND <rendition 3종 존재>
2) 1 row 변경된 호출만 이벤트 발행 (동시 호출 시 이벤트 쌍은 1번)
   - video.<id>                : {"event": "published"}
   - notifications.<owner_id>  : {"event": "published", "scope": "videos", "id", "name"(20자)}

commit이 이벤트보다 먼저 (transaction.on_commit). 이벤트 발행은 best-effort (실패해도 published는 유지).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from apps.support.realtime.channels import notification_channel, video_channel
from apps.support.video.constants import (
    NOTIFICATION_NAME_MAX_LENGTH,
    NOTIFICATION_SCOPE_VIDEOS,
    VideoEvent,
)
from apps.support.video.models import Video, readiness_q
from apps.support.video.utils import truncate_name
from src.application.ports.event_bus import EventBusError, IEventBus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishResult:
    video_id: int
    transitioned: bool
    events: tuple = ()


class VideoPublisher:

    def __init__(self, bus: IEventBus) -> None:
        self._bus = bus

    def publish(self, video_id: int) -> PublishResult:
        video_id = int(video_id)

        updated = (
            Video.objects.filter(readiness_q(), pk=video_id, published=False)
            .update(published=True, updated_at=timezone.now())
        )
        if updated != 1:
            logger.info("PUBLISH_SKIP video_id=%s reason=already_published_or_not_ready", video_id)
            return PublishResult(video_id=video_id, transitioned=False)

        name, owner_id = Video.objects.values_list("name", "owner_id").get(pk=video_id)
        logger.info("VIDEO_PUBLISHED video_id=%s owner_id=%s", video_id, owner_id)

        events = [
            (video_channel(video_id), {"event": VideoEvent.PUBLISHED}),
            (
                notification_channel(owner_id),
                {
                    "event": VideoEvent.PUBLISHED,
                    "scope": NOTIFICATION_SCOPE_VIDEOS,
                    "id": video_id,
                    "name": truncate_name(name, NOTIFICATION_NAME_MAX_LENGTH),
                },
            ),
        ]

        # 바깥 transaction이 있으면 commit 이후에 발행 (rollback 시 발행 없음)
        transaction.on_commit(lambda: self._emit(video_id, events))
        return PublishResult(video_id=video_id, transitioned=True, events=tuple(events))

    def _emit(self, video_id: int, events: list) -> None:
        for channel, message in events:
            try:
                self._bus.publish(channel, message)
            except EventBusError:
                logger.exception("PUBLISH_EVENT_FAILED video_id=%s channel=%s", video_id, channel)
