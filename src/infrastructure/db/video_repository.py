"""
VideoRepository - IVideoRepository 구현체

Django ORM + Django storage(attachment store).
모든 쓰기는 QuerySet.update (column 단위) — 병렬 Worker 간 lost update 방지.
"""
from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Any

from django.core.files import File
from django.db.models import Q
from django.utils import timezone

from apps.support.video.models import Video
from src.application.ports.video_repository import IVideoRepository, SourceUnavailableError

logger = logging.getLogger(__name__)

COPY_CHUNK_BYTES = 1024 * 1024


def _empty_q(field: str) -> Q:
    return Q(**{field: ""}) | Q(**{f"{field}__isnull": True})


class VideoRepository(IVideoRepository):
    """IVideoRepository 구현 (Django ORM)"""

    def fetch_source(self, video_id: int, workdir: Path) -> Path:
        row = Video.objects.filter(pk=int(video_id)).only("id", "source_file").first()
        if row is None:
            raise SourceUnavailableError(f"video {video_id} not found")

        source = row.source_file
        if not source:
            raise SourceUnavailableError(f"video {video_id} has no source file")

        try:
            local = Path(source.path)
        except NotImplementedError:
            local = None

        if local is not None:
            if not local.is_file() or not os.access(local, os.R_OK):
                raise SourceUnavailableError(f"video {video_id} source not readable: {local}")
            return local

        # 원격 storage: job temp dir 안으로 복사 (temp dir 정리 시 함께 삭제)
        dst = Path(workdir) / f"source{Path(source.name).suffix}"
        try:
            with source.storage.open(source.name, "rb") as src, open(dst, "wb") as out:
                shutil.copyfileobj(src, out, length=COPY_CHUNK_BYTES)
        except FileNotFoundError as e:
            raise SourceUnavailableError(f"video {video_id} source missing: {source.name}") from e
        return dst

    def has_media(self, video_id: int, field: str) -> bool:
        return (
            Video.objects.filter(pk=int(video_id))
            .exclude(_empty_q(field))
            .exists()
        )

    def attach_media(self, video_id: int, field: str, path: Path, filename: str) -> bool:
        model_field = Video._meta.get_field(field)
        storage = model_field.storage
        upload_name = model_field.generate_filename(None, filename)

        with open(path, "rb") as fh:
            stored_name = storage.save(upload_name, File(fh, name=filename))

        try:
            updated = (
                Video.objects.filter(_empty_q(field), pk=int(video_id))
                .update(**{field: stored_name, "updated_at": timezone.now()})
            )
        except Exception:
            logger.warning("ATTACH_FAILED video_id=%s field=%s name=%s (stored file removed)", video_id, field, stored_name)
            storage.delete(stored_name)
            raise

        if not updated:
            # 중복 실행이 먼저 기록했거나 Video가 사라짐 → 방금 저장한 파일은 고아
            logger.info("ATTACH_SKIP video_id=%s field=%s reason=already_set_or_missing", video_id, field)
            storage.delete(stored_name)
            return False

        logger.info("ATTACHED video_id=%s field=%s name=%s", video_id, field, stored_name)
        return True

    def set_technical_metadata(self, video_id: int, data: dict[str, Any]) -> bool:
        updated = Video.objects.filter(pk=int(video_id)).update(
            technical_metadata=data,
            updated_at=timezone.now(),
        )
        return bool(updated)
