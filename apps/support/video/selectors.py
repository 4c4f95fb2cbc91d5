# apps/support/video/selectors.py

from typing import Optional

from django.db.models import QuerySet

from apps.support.video.models import Video


def published_videos() -> QuerySet:
    """게시된 Video 목록 (최신순)."""
    return Video.objects.published().select_related("owner").order_by("-id")


def get_published_video(video_id: int) -> Optional[Video]:
    return published_videos().filter(pk=int(video_id)).first()


def videos_owned_by(owner_id: int) -> QuerySet:
    """소유자별 Video 목록. 게시 여부와 무관."""
    return Video.objects.filter(owner_id=owner_id).order_by("-id")
