# PATH: apps/support/video/services/ingest.py
from __future__ import annotations

import logging

from django.db import transaction

from apps.support.video.models import Video

logger = logging.getLogger(__name__)


@transaction.atomic
def create_video(*, owner, name: str, source_file, description: str = "") -> Video:
    """
    업로드 원본으로 Video 생성.
    - full_clean: name/source 필수, source는 video/* 만
    - 저장 성공 시 commit 이후 제작 작업 dispatch (signals)
    """
    video = Video(
        owner=owner,
        name=name,
        description=description or "",
        source_file=source_file,
    )
    video.full_clean()
    video.save()

    logger.info("VIDEO_CREATED video_id=%s owner_id=%s", video.id, video.owner_id)
    return video
