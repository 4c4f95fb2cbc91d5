"""
pytest 공용 fixture

- DB: pytest-django (SQLite in-memory, settings.test)
- Event Bus: 테스트마다 새 InMemoryEventBus
- 파일 저장소: 테스트마다 tmp MEDIA_ROOT
"""
from __future__ import annotations

from pathlib import Path

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.support.realtime.bus import init_event_bus, reset_event_bus
from apps.support.realtime.memory_bus import InMemoryEventBus


# ============================================================================
# EVENT BUS
# ============================================================================

@pytest.fixture(autouse=True)
def event_bus():
    """프로세스 전역 Event Bus를 테스트 전용 메모리 버스로 교체."""
    reset_event_bus()
    bus = init_event_bus(InMemoryEventBus())
    yield bus
    reset_event_bus()


# ============================================================================
# STORAGE
# ============================================================================

@pytest.fixture(autouse=True)
def media_root(settings, tmp_path) -> Path:
    root = tmp_path / "media"
    root.mkdir()
    settings.MEDIA_ROOT = str(root)
    return root


@pytest.fixture
def worker_env(monkeypatch, tmp_path) -> Path:
    """load_config()가 읽는 worker 환경 변수."""
    temp_dir = tmp_path / "worker-tmp"
    monkeypatch.setenv("VIDEO_WORKER_TEMP_DIR", str(temp_dir))
    monkeypatch.setenv("FFMPEG_BIN", "ffmpeg-test")
    monkeypatch.setenv("FFPROBE_BIN", "ffprobe-test")
    return temp_dir


# ============================================================================
# MODELS
# ============================================================================

def make_upload(name: str = "clip.mp4", content: bytes = b"\x00\x00\x00\x18ftypmp42") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, content, content_type="video/mp4")


@pytest.fixture
def user(db, django_user_model):
    return django_user_model.objects.create_user(username="uploader", password="pw")


@pytest.fixture
def other_user(db, django_user_model):
    return django_user_model.objects.create_user(username="other", password="pw")


@pytest.fixture
def make_video(db, user, recorded_dispatch):
    """Video 생성 (dispatch 는 recorded_dispatch 가 막아둠)."""
    from apps.support.video.models import Video

    def _make(name: str = "Holiday clip", owner=None, **fields) -> Video:
        video = Video(owner=owner or user, name=name, source_file=make_upload())
        video.save()
        if fields:
            Video.objects.filter(pk=video.pk).update(**fields)
            video.refresh_from_db()
        return video

    return _make


@pytest.fixture
def recorded_dispatch(monkeypatch):
    """post_save → on_commit dispatch 가 실제 .delay()를 부르지 않도록 기록만."""
    calls: list[int] = []
    monkeypatch.setattr(
        "apps.support.video.signals.dispatch_production_jobs",
        lambda video_id: calls.append(video_id),
    )
    return calls


@pytest.fixture
def ready_fields() -> dict:
    """rendition 3종이 모두 채워진 상태."""
    return {
        "mp4_file": "videos/mp4/1.mp4",
        "ogv_file": "videos/ogv/1.ogv",
        "webm_file": "videos/webm/1.webm",
    }
