"""
제작 작업: Handler (가짜 repo) / VideoRepository (ORM + storage) / Celery task
"""
from pathlib import Path
from unittest import mock

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from django.db.models import QuerySet

from apps.shared.tasks import media as media_tasks
from apps.support.video.models import Video
from apps.support.video.services.sweeper import sweep_unpublished_videos
from apps.worker.video_worker.video.transcoder import TranscodeError
from src.application.ports.video_repository import IVideoRepository, SourceUnavailableError
from src.application.video.handler import ProduceMediaJobHandler, handle_probe_job
from src.infrastructure.db.video_repository import VideoRepository


# ============================================================================
# Handler
# ============================================================================

class FakeRepo(IVideoRepository):
    def __init__(self, source: Path, *, existing=(), lose_race=False):
        self.source = source
        self.existing = set(existing)
        self.lose_race = lose_race
        self.attached = []
        self.metadata = {}

    def fetch_source(self, video_id, workdir):
        return self.source

    def has_media(self, video_id, field):
        return field in self.existing

    def attach_media(self, video_id, field, path, filename):
        self.attached.append((video_id, field, Path(path).read_bytes(), filename))
        return not self.lose_race

    def set_technical_metadata(self, video_id, data):
        self.metadata[video_id] = data
        return True


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "source.mp4"
    path.write_bytes(b"source-bytes")
    return path


def _copy_produce(input_path, output_path):
    output_path.write_bytes(Path(input_path).read_bytes() + b"-encoded")


def test_handler_produces_and_attaches(source, tmp_path):
    repo = FakeRepo(source)
    handler = ProduceMediaJobHandler(
        repo, field="webm_file", extension="webm", produce_fn=_copy_produce, temp_dir=str(tmp_path / "work"),
    )

    assert handler.handle("5") == "ok"
    assert repo.attached == [(5, "webm_file", b"source-bytes-encoded", "5.webm")]
    # temp dir 정리
    assert list((tmp_path / "work").iterdir()) == []


def test_handler_skips_existing_field(source, tmp_path):
    produce = mock.Mock()
    repo = FakeRepo(source, existing={"mp4_file"})
    handler = ProduceMediaJobHandler(repo, field="mp4_file", extension="mp4", produce_fn=produce, temp_dir=str(tmp_path))

    assert handler.handle(5) == "skip:exists"
    produce.assert_not_called()
    assert repo.attached == []


def test_handler_reports_lost_race(source, tmp_path):
    repo = FakeRepo(source, lose_race=True)
    handler = ProduceMediaJobHandler(repo, field="ogv_file", extension="ogv", produce_fn=_copy_produce, temp_dir=str(tmp_path))

    assert handler.handle(5) == "skip:lost_race"


def test_handler_cleans_up_on_failure(source, tmp_path):
    work = tmp_path / "work"
    repo = FakeRepo(source)
    handler = ProduceMediaJobHandler(
        repo,
        field="mp4_file",
        extension="mp4",
        produce_fn=mock.Mock(side_effect=TranscodeError("boom")),
        temp_dir=str(work),
    )

    with pytest.raises(TranscodeError):
        handler.handle(5)

    assert repo.attached == []
    assert list(work.iterdir()) == []


def test_handle_probe_job(source, tmp_path):
    repo = FakeRepo(source)

    assert handle_probe_job(repo, video_id=3, probe_fn=lambda p: {"source": p}, temp_dir=str(tmp_path)) is True
    assert repo.metadata == {3: {"source": str(source)}}


# ============================================================================
# VideoRepository
# ============================================================================

@pytest.mark.django_db
def test_repository_fetch_source_returns_local_path(make_video, tmp_path):
    video = make_video()

    path = VideoRepository().fetch_source(video.id, tmp_path)

    assert path.read_bytes() == Video.objects.get(pk=video.id).source_file.read()


@pytest.mark.django_db
def test_repository_fetch_source_missing_file(make_video, tmp_path):
    video = make_video()
    video.source_file.storage.delete(video.source_file.name)

    with pytest.raises(SourceUnavailableError):
        VideoRepository().fetch_source(video.id, tmp_path)


@pytest.mark.django_db
def test_repository_fetch_source_unknown_video(tmp_path):
    with pytest.raises(SourceUnavailableError):
        VideoRepository().fetch_source(404, tmp_path)


@pytest.mark.django_db
def test_repository_attach_media_writes_only_its_column(make_video, tmp_path):
    video = make_video(likes=7)
    produced = tmp_path / "output.mp4"
    produced.write_bytes(b"mp4-bytes")
    repo = VideoRepository()

    assert repo.has_media(video.id, "mp4_file") is False
    assert repo.attach_media(video.id, "mp4_file", produced, f"{video.id}.mp4") is True

    stored = Video.objects.get(pk=video.id)
    assert stored.mp4_file.name.startswith("videos/mp4/")
    assert stored.mp4_file.read() == b"mp4-bytes"
    assert stored.likes == 7
    assert not stored.webm_file
    assert repo.has_media(video.id, "mp4_file") is True


@pytest.mark.django_db
def test_repository_attach_media_keeps_committed_siblings(make_video, tmp_path):
    video = make_video()
    # mp4 Worker가 시작할 때 읽은 row (sibling 모두 비어 있음)
    stale = Video.objects.get(pk=video.id)
    # 그 사이 다른 Worker / like 가 commit
    Video.objects.filter(pk=video.id).update(
        ogv_file="videos/ogv/done.ogv",
        webm_file="videos/webm/done.webm",
        thumbnail="thumbnails/done.png",
        likes=3,
    )
    produced = tmp_path / "output.mp4"
    produced.write_bytes(b"mp4-bytes")

    assert VideoRepository().attach_media(stale.id, "mp4_file", produced, f"{stale.id}.mp4") is True

    stored = Video.objects.get(pk=video.id)
    assert stored.mp4_file
    assert stored.ogv_file.name == "videos/ogv/done.ogv"
    assert stored.webm_file.name == "videos/webm/done.webm"
    assert stored.thumbnail.name == "thumbnails/done.png"
    assert stored.likes == 3


@pytest.mark.django_db
def test_repository_attach_media_removes_file_when_update_fails(make_video, tmp_path, media_root):
    video = make_video()
    produced = tmp_path / "output.webm"
    produced.write_bytes(b"webm")

    with mock.patch.object(QuerySet, "update", side_effect=DatabaseError("connection lost")):
        with pytest.raises(DatabaseError):
            VideoRepository().attach_media(video.id, "webm_file", produced, f"{video.id}.webm")

    assert not Video.objects.get(pk=video.id).webm_file
    assert not (media_root / "videos" / "webm").exists() or list((media_root / "videos" / "webm").iterdir()) == []


@pytest.mark.django_db
def test_repository_attach_media_lost_race_removes_file(make_video, tmp_path, media_root):
    video = make_video(thumbnail="thumbnails/first.png")
    produced = tmp_path / "output.png"
    produced.write_bytes(b"png")

    assert VideoRepository().attach_media(video.id, "thumbnail", produced, f"{video.id}.png") is False
    assert Video.objects.get(pk=video.id).thumbnail.name == "thumbnails/first.png"
    assert not (media_root / "thumbnails").exists() or list((media_root / "thumbnails").iterdir()) == []


@pytest.mark.django_db
def test_repository_set_technical_metadata(make_video):
    video = make_video()

    assert VideoRepository().set_technical_metadata(video.id, {"general": {"duration": "1.0"}}) is True
    assert Video.objects.get(pk=video.id).technical_metadata == {"general": {"duration": "1.0"}}
    assert VideoRepository().set_technical_metadata(999, {}) is False


# ============================================================================
# Celery tasks
# ============================================================================

def _fake_ffmpeg(cmd, **kwargs):
    Path(cmd[-1]).write_bytes(b"produced")
    return mock.Mock(returncode=0, stdout="", stderr="")


@pytest.mark.django_db
@pytest.mark.parametrize(
    "task, field",
    [
        (media_tasks.encode_mp4_rendition, "mp4_file"),
        (media_tasks.encode_ogv_rendition, "ogv_file"),
        (media_tasks.encode_webm_rendition, "webm_file"),
        (media_tasks.cut_video_thumbnail, "thumbnail"),
    ],
)
def test_media_task_fills_its_field(make_video, worker_env, task, field):
    video = make_video()

    with mock.patch("subprocess.run", side_effect=_fake_ffmpeg) as run:
        assert task(video.id) == "ok"
        # 재전달: ffmpeg 재실행 없이 스킵
        assert task(video.id) == "skip:exists"

    assert run.call_count == 1
    assert run.call_args.args[0][0] == "ffmpeg-test"
    assert getattr(Video.objects.get(pk=video.id), field)


@pytest.mark.django_db
def test_media_task_propagates_transcode_error(make_video, worker_env):
    video = make_video()

    with mock.patch("subprocess.run", return_value=mock.Mock(returncode=1, stdout="", stderr="bad")):
        with pytest.raises(TranscodeError):
            media_tasks.run_media_job("mp4", video.id)

    assert not Video.objects.get(pk=video.id).mp4_file


@pytest.mark.django_db
def test_media_task_missing_video_is_fatal(worker_env):
    with pytest.raises(SourceUnavailableError):
        media_tasks.run_media_job("webm", 404)


def test_media_tasks_retry_only_transcode_errors():
    for task in (
        media_tasks.encode_mp4_rendition,
        media_tasks.encode_ogv_rendition,
        media_tasks.encode_webm_rendition,
        media_tasks.cut_video_thumbnail,
    ):
        assert task.autoretry_for == (TranscodeError,)
        assert task.name.startswith("media.")


def test_build_media_handler_unknown_kind():
    with pytest.raises(ValueError):
        media_tasks.build_media_handler("gif", mock.Mock())


@pytest.mark.django_db
def test_probe_task_stores_metadata(make_video, worker_env):
    video = make_video()
    stdout = '{"format": {"duration": "2.0"}, "streams": [{"codec_type": "video"}]}'

    with mock.patch("subprocess.run", return_value=mock.Mock(returncode=0, stdout=stdout, stderr="")):
        assert media_tasks.probe_video_metadata(video.id) is True

    assert Video.objects.get(pk=video.id).technical_metadata["general"] == {"duration": "2.0"}


@pytest.mark.django_db
def test_sweep_task(make_video, ready_fields, event_bus, django_capture_on_commit_callbacks):
    video = make_video(**ready_fields)

    with django_capture_on_commit_callbacks(execute=True):
        assert media_tasks.sweep_unpublished() == {"published": [video.id], "skipped": [], "failed": []}

    assert event_bus.messages_for(f"video.{video.id}") == [{"event": "published"}]


@pytest.mark.django_db
def test_failed_ogv_blocks_publication_until_retry_succeeds(
    make_video, user, worker_env, event_bus, django_capture_on_commit_callbacks
):
    video = make_video(name="Trip")
    ogv_attempts = []

    def ffmpeg(cmd, **kwargs):
        out = Path(cmd[-1])
        if out.suffix == ".ogv":
            ogv_attempts.append(out)
            if len(ogv_attempts) == 1:
                return mock.Mock(returncode=1, stdout="", stderr="libtheora crashed")
        out.write_bytes(b"produced")
        return mock.Mock(returncode=0, stdout="", stderr="")

    with mock.patch("subprocess.run", side_effect=ffmpeg):
        assert media_tasks.run_media_job("mp4", video.id) == "ok"
        assert media_tasks.run_media_job("webm", video.id) == "ok"
        with pytest.raises(TranscodeError):
            media_tasks.run_media_job("ogv", video.id)

        with django_capture_on_commit_callbacks(execute=True):
            report = sweep_unpublished_videos(bus=event_bus)
        assert report.candidates == []
        assert Video.objects.get(pk=video.id).published is False
        assert event_bus.published == []

        # Celery autoretry
        assert media_tasks.run_media_job("ogv", video.id) == "ok"

    with django_capture_on_commit_callbacks(execute=True):
        report = sweep_unpublished_videos(bus=event_bus)

    assert report.published == [video.id]
    assert Video.objects.get(pk=video.id).published is True
    assert event_bus.published == [
        (f"video.{video.id}", {"event": "published"}),
        (
            f"notifications.{user.id}",
            {"event": "published", "scope": "videos", "id": video.id, "name": "Trip"},
        ),
    ]


# ============================================================================
# probe_video_metadata command
# ============================================================================

@pytest.mark.django_db
def test_probe_command_requires_targets():
    with pytest.raises(CommandError):
        call_command("probe_video_metadata")


@pytest.mark.django_db
def test_probe_command_enqueues_missing(make_video, monkeypatch, capsys):
    probed = make_video(technical_metadata={"general": {}})
    pending = make_video()
    delay = mock.Mock()
    monkeypatch.setattr(media_tasks.probe_video_metadata, "delay", delay)

    call_command("probe_video_metadata", "--missing")

    delay.assert_called_once_with(pending.id)
    assert f"ENQUEUED | video_id={pending.id}" in capsys.readouterr().out
    assert probed.id != pending.id
