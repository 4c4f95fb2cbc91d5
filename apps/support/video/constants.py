# PATH: apps/support/video/constants.py

from __future__ import annotations


class MediaKind:
    """
    ⚠️ SSOT: 작업 종류(job kind) ↔ Video 필드 매핑.

    - dispatch / worker / sweeper에서 공통으로 쓰는 "외부 상수" 역할
    """

    MP4 = "mp4"
    OGV = "ogv"
    WEBM = "webm"
    THUMBNAIL = "thumbnail"

    RENDITIONS = (MP4, OGV, WEBM)
    ALL = (MP4, OGV, WEBM, THUMBNAIL)

    FIELDS = {
        MP4: "mp4_file",
        OGV: "ogv_file",
        WEBM: "webm_file",
        THUMBNAIL: "thumbnail",
    }

    EXTENSIONS = {
        MP4: "mp4",
        OGV: "ogv",
        WEBM: "webm",
        THUMBNAIL: "png",
    }


# publish 판정에 쓰는 필드 (thumbnail 제외)
RENDITION_FIELDS = tuple(MediaKind.FIELDS[k] for k in MediaKind.RENDITIONS)


class VideoEvent:
    PUBLISHED = "published"
    LIKED = "liked"
    DISLIKED = "disliked"


NOTIFICATION_SCOPE_VIDEOS = "videos"

# notifications.<owner_id> 메시지의 name 최대 길이
NOTIFICATION_NAME_MAX_LENGTH = 20
