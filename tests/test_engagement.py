from unittest import mock

import pytest
from django.db import transaction

from apps.support.video.models import Video
from apps.support.video.services.engagement import dislike_video, like_video
from src.application.ports.event_bus import EventBusError


class Rollback(Exception):
    pass


@pytest.mark.django_db
def test_like_then_dislike_then_like(make_video, event_bus, django_capture_on_commit_callbacks):
    video = make_video()

    with django_capture_on_commit_callbacks(execute=True):
        assert like_video(video.id, bus=event_bus) == 1
        assert like_video(video.id, bus=event_bus) == 2
        assert dislike_video(video.id, bus=event_bus) == 1

    assert Video.objects.get(pk=video.id).likes == 1
    assert event_bus.messages_for(f"video.{video.id}") == [
        {"event": "liked"},
        {"event": "liked"},
        {"event": "disliked"},
    ]


@pytest.mark.django_db
def test_three_likes_one_dislike_leaves_two(make_video, event_bus, django_capture_on_commit_callbacks):
    video = make_video()

    with django_capture_on_commit_callbacks(execute=True):
        for _ in range(3):
            like_video(video.id, bus=event_bus)
        dislike_video(video.id, bus=event_bus)

    assert Video.objects.get(pk=video.id).likes == 2
    assert event_bus.messages_for(f"video.{video.id}") == [
        {"event": "liked"},
        {"event": "liked"},
        {"event": "liked"},
        {"event": "disliked"},
    ]


@pytest.mark.django_db
def test_dislike_can_go_negative(make_video, event_bus):
    video = make_video()

    assert dislike_video(video.id, bus=event_bus) == -1
    assert Video.objects.get(pk=video.id).likes == -1


@pytest.mark.django_db
def test_like_emits_only_after_commit(make_video, event_bus, django_capture_on_commit_callbacks):
    video = make_video()

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        like_video(video.id, bus=event_bus)
        assert event_bus.published == []

    assert len(callbacks) == 1
    assert event_bus.messages_for(f"video.{video.id}") == [{"event": "liked"}]


@pytest.mark.django_db
def test_like_rolled_back_by_caller_emits_nothing(make_video, event_bus, django_capture_on_commit_callbacks):
    video = make_video()

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(Rollback):
            with transaction.atomic():
                like_video(video.id, bus=event_bus)
                raise Rollback

    assert callbacks == []
    assert event_bus.published == []
    assert Video.objects.get(pk=video.id).likes == 0


@pytest.mark.django_db
def test_like_does_not_touch_other_columns(make_video, event_bus):
    video = make_video()
    stale = Video.objects.get(pk=video.id)

    # 다른 Worker가 그 사이 rendition 기록
    Video.objects.filter(pk=video.id).update(mp4_file="videos/mp4/1.mp4")
    like_video(stale.id, bus=event_bus)

    fresh = Video.objects.get(pk=video.id)
    assert fresh.mp4_file.name == "videos/mp4/1.mp4"
    assert fresh.likes == 1


@pytest.mark.django_db
def test_like_unknown_video_raises(event_bus, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        with pytest.raises(Video.DoesNotExist):
            like_video(12345, bus=event_bus)

    assert event_bus.published == []


@pytest.mark.django_db
def test_like_survives_bus_failure(make_video, django_capture_on_commit_callbacks):
    video = make_video()
    bus = mock.Mock()
    bus.publish.side_effect = EventBusError("down")

    with django_capture_on_commit_callbacks(execute=True):
        assert like_video(video.id, bus=bus) == 1

    bus.publish.assert_called_once()
    assert Video.objects.get(pk=video.id).likes == 1
