# apps/shared/tasks/media.py
"""
Video 제작/게시 Celery 작업 (composition root)

- media.encode_mp4 / encode_ogv / encode_webm / cut_thumbnail : Dispatcher가 enqueue, payload=video_id
- media.probe_metadata : 원본 ffprobe → technical_metadata
- media.sweep_unpublished : beat (매 60초)

재시도 정책:
- TranscodeError (ffmpeg 실패/timeout) → autoretry
- SourceUnavailableError → 재시도 없이 실패 (원본이 없으면 운영자 개입 필요)
"""
from __future__ import annotations

import logging

from celery import shared_task

from apps.support.realtime.bus import get_event_bus
from apps.support.video.constants import MediaKind
from apps.support.video.services.sweeper import sweep_unpublished_videos
from apps.worker.video_worker.config import Config, load_config
from apps.worker.video_worker.video.probe import ProbeError, probe_media_info
from apps.worker.video_worker.video.thumbnail import generate_thumbnail
from apps.worker.video_worker.video.transcoder import TranscodeError, transcode_rendition
from src.application.ports.video_repository import SourceUnavailableError
from src.application.video.handler import ProduceMediaJobHandler, handle_probe_job
from src.infrastructure.db.video_repository import VideoRepository

logger = logging.getLogger(__name__)

MEDIA_RETRY_KWARGS = {"max_retries": 3}


def build_media_handler(kind: str, cfg: Config) -> ProduceMediaJobHandler:
    if kind == MediaKind.THUMBNAIL:
        def produce(input_path, output_path):
            generate_thumbnail(
                input_path=input_path,
                output_path=output_path,
                ffmpeg_bin=cfg.FFMPEG_BIN,
                at_seconds=cfg.THUMBNAIL_AT_SECONDS,
                width=cfg.THUMBNAIL_WIDTH,
                height=cfg.THUMBNAIL_HEIGHT,
                timeout=min(int(cfg.FFMPEG_TIMEOUT_SECONDS), 120),
            )
    elif kind in MediaKind.RENDITIONS:
        def produce(input_path, output_path):
            transcode_rendition(
                kind=kind,
                input_path=input_path,
                output_path=output_path,
                ffmpeg_bin=cfg.FFMPEG_BIN,
                timeout=int(cfg.FFMPEG_TIMEOUT_SECONDS),
            )
    else:
        raise ValueError(f"unknown media kind: {kind}")

    return ProduceMediaJobHandler(
        VideoRepository(),
        field=MediaKind.FIELDS[kind],
        extension=MediaKind.EXTENSIONS[kind],
        produce_fn=produce,
        temp_dir=cfg.TEMP_DIR,
    )


def run_media_job(kind: str, video_id: int) -> str:
    handler = build_media_handler(kind, load_config())
    try:
        return handler.handle(video_id)
    except SourceUnavailableError as e:
        logger.error("MEDIA_JOB_FATAL kind=%s video_id=%s error=%s", kind, video_id, e)
        raise
    except TranscodeError as e:
        logger.warning("MEDIA_JOB_FAILED kind=%s video_id=%s error=%s", kind, video_id, e)
        raise


@shared_task(
    name="media.encode_mp4",
    acks_late=True,
    autoretry_for=(TranscodeError,),
    retry_backoff=True,
    retry_kwargs=MEDIA_RETRY_KWARGS,
)
def encode_mp4_rendition(video_id: int) -> str:
    return run_media_job(MediaKind.MP4, video_id)


@shared_task(
    name="media.encode_ogv",
    acks_late=True,
    autoretry_for=(TranscodeError,),
    retry_backoff=True,
    retry_kwargs=MEDIA_RETRY_KWARGS,
)
def encode_ogv_rendition(video_id: int) -> str:
    return run_media_job(MediaKind.OGV, video_id)


@shared_task(
    name="media.encode_webm",
    acks_late=True,
    autoretry_for=(TranscodeError,),
    retry_backoff=True,
    retry_kwargs=MEDIA_RETRY_KWARGS,
)
def encode_webm_rendition(video_id: int) -> str:
    return run_media_job(MediaKind.WEBM, video_id)


@shared_task(
    name="media.cut_thumbnail",
    acks_late=True,
    autoretry_for=(TranscodeError,),
    retry_backoff=True,
    retry_kwargs=MEDIA_RETRY_KWARGS,
)
def cut_video_thumbnail(video_id: int) -> str:
    return run_media_job(MediaKind.THUMBNAIL, video_id)


@shared_task(
    name="media.probe_metadata",
    acks_late=True,
    autoretry_for=(ProbeError,),
    retry_backoff=True,
    retry_kwargs=MEDIA_RETRY_KWARGS,
)
def probe_video_metadata(video_id: int) -> bool:
    cfg = load_config()
    return handle_probe_job(
        VideoRepository(),
        video_id=video_id,
        probe_fn=lambda path: probe_media_info(
            input_path=path,
            ffprobe_bin=cfg.FFPROBE_BIN,
            timeout=int(cfg.FFPROBE_TIMEOUT_SECONDS),
        ),
        temp_dir=cfg.TEMP_DIR,
    )


@shared_task(name="media.sweep_unpublished", ignore_result=True)
def sweep_unpublished() -> dict:
    report = sweep_unpublished_videos(bus=get_event_bus())
    return {
        "published": report.published,
        "skipped": report.skipped,
        "failed": report.failed,
    }
