"""
Completion Sweeper - published=False 이면서 rendition 3종이 모두 있는 Video를 publish.

Run via Celery beat (매 60초, media.sweep_unpublished) 또는:
  python manage.py sweep_unpublished_videos

- 판정은 쿼리 1번 (row 단위로 3개 필드를 같은 시점에 읽음)
- 이미 publish된 Video는 대상에서 빠지므로 반복 실행해도 안전
- 한 Video 실패가 나머지 처리를 막지 않는다
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from apps.support.video.models import Video
from apps.support.video.services.publication import VideoPublisher
from src.application.ports.event_bus import IEventBus

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    candidates: list[int] = field(default_factory=list)
    published: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)


def find_ready_video_ids() -> list[int]:
    return list(
        Video.objects.ready_for_publication()
        .order_by("id")
        .values_list("id", flat=True)
    )


def sweep_unpublished_videos(*, bus: IEventBus, dry_run: bool = False) -> SweepReport:
    report = SweepReport(candidates=find_ready_video_ids())
    if dry_run:
        return report

    publisher = VideoPublisher(bus)
    for video_id in report.candidates:
        try:
            result = publisher.publish(video_id)
        except Exception:
            logger.exception("SWEEP_PUBLISH_FAILED video_id=%s", video_id)
            report.failed.append(video_id)
            continue

        if result.transitioned:
            report.published.append(video_id)
        else:
            report.skipped.append(video_id)

    logger.info(
        "SWEEP_DONE candidates=%s published=%s skipped=%s failed=%s",
        len(report.candidates), len(report.published), len(report.skipped), len(report.failed),
    )
    return report
