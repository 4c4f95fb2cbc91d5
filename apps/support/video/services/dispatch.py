"""
Dispatcher - Video 생성 직후 4개 제작 작업 enqueue.

mp4 / ogv / webm / thumbnail 은 서로 독립 (순서 보장 없음, 각자 재시도).
payload는 video_id 하나뿐. 완료를 기다리지 않는다.
"""

from __future__ import annotations

import logging

from apps.support.video.constants import MediaKind

logger = logging.getLogger(__name__)


def _job_tasks() -> dict:
    from apps.shared.tasks.media import (
        cut_video_thumbnail,
        encode_mp4_rendition,
        encode_ogv_rendition,
        encode_webm_rendition,
    )

    return {
        MediaKind.MP4: encode_mp4_rendition,
        MediaKind.OGV: encode_ogv_rendition,
        MediaKind.WEBM: encode_webm_rendition,
        MediaKind.THUMBNAIL: cut_video_thumbnail,
    }


def dispatch_production_jobs(video_id: int) -> list[str]:
    """
    반환: enqueue 된 job kind 목록 (MediaKind.ALL 순서)
    enqueue 실패는 그대로 raise (생성 흐름에서 드러나야 함).
    """
    video_id = int(video_id)
    tasks = _job_tasks()

    dispatched: list[str] = []
    for kind in MediaKind.ALL:
        tasks[kind].delay(video_id)
        dispatched.append(kind)

    logger.info("DISPATCHED video_id=%s jobs=%s", video_id, ",".join(dispatched))
    return dispatched
