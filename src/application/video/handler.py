"""
ProduceMediaJobHandler - Rendition/Thumbnail 작업 처리 유스케이스

흐름:
1. 이미 field가 채워져 있으면 스킵 (재전달된 메시지)
2. job 전용 temp dir 생성 (실행마다 고유)
3. 원본 확보 (SourceUnavailableError → 재시도 없음)
4. produce_fn 실행 (ffmpeg, 실패 시 TranscodeError → 재시도)
5. 결과를 field 하나에만 기록 (조건부 column UPDATE)
6. temp dir 정리 (성공/실패 무관)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from apps.worker.video_worker.utils import temp_workdir
from src.application.ports.video_repository import IVideoRepository

logger = logging.getLogger(__name__)


# produce_fn 시그니처: (input_path, output_path) -> None
ProduceMediaFn = Callable[[str, Path], Any]
# probe_fn 시그니처: (input_path) -> dict
ProbeMediaFn = Callable[[str], dict]


class ProduceMediaJobHandler:
    """
    Video 파생 미디어 1종 제작 Handler

    멱등 확인 -> temp dir -> 원본 -> 제작 -> column 기록 -> 정리
    """

    def __init__(
        self,
        repo: IVideoRepository,
        *,
        field: str,
        extension: str,
        produce_fn: ProduceMediaFn,
        temp_dir: str,
    ) -> None:
        self._repo = repo
        self._field = field
        self._extension = extension
        self._produce_fn = produce_fn
        self._temp_dir = temp_dir

    def handle(self, video_id: int) -> str:
        """
        Returns:
            "ok" | "skip:exists" | "skip:lost_race"

            - "skip:exists": 이미 결과가 있음 (중복 전달) → 아무것도 하지 않음
            - "skip:lost_race": 동시에 돈 다른 실행이 먼저 기록 → 이번 결과는 폐기
        """
        video_id = int(video_id)

        if self._repo.has_media(video_id, self._field):
            logger.info("IDEMPOTENT_SKIP video_id=%s field=%s reason=exists", video_id, self._field)
            return "skip:exists"

        with temp_workdir(self._temp_dir, prefix=f"{self._field}-{video_id}-") as wd:
            src_path = self._repo.fetch_source(video_id, wd)
            out_path = wd / f"output.{self._extension}"

            logger.info("[HANDLER] Producing video_id=%s field=%s", video_id, self._field)
            self._produce_fn(str(src_path), out_path)

            filename = f"{video_id}.{self._extension}"
            if not self._repo.attach_media(video_id, self._field, out_path, filename):
                return "skip:lost_race"

        logger.info("[HANDLER] Completed video_id=%s field=%s", video_id, self._field)
        return "ok"


def handle_probe_job(
    repo: IVideoRepository,
    *,
    video_id: int,
    probe_fn: ProbeMediaFn,
    temp_dir: str,
) -> bool:
    """원본 ffprobe → technical_metadata 기록. 반환: 기록 여부"""
    video_id = int(video_id)
    with temp_workdir(temp_dir, prefix=f"probe-{video_id}-") as wd:
        src_path = repo.fetch_source(video_id, wd)
        info = probe_fn(str(src_path))
    return repo.set_technical_metadata(video_id, info)
