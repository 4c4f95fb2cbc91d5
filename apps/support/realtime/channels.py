# PATH: apps/support/realtime/channels.py
"""
Event Bus 채널 이름 규칙 (SSOT)

- video.<video_id>          : 비디오 단위 공개 채널 (published / liked / disliked)
- notifications.<user_id>   : 사용자 개인 알림 채널
"""
from __future__ import annotations

from fnmatch import fnmatchcase

VIDEO_CHANNEL_PREFIX = "video."
NOTIFICATION_CHANNEL_PREFIX = "notifications."

VIDEO_CHANNEL_PATTERN = f"{VIDEO_CHANNEL_PREFIX}*"
NOTIFICATION_CHANNEL_PATTERN = f"{NOTIFICATION_CHANNEL_PREFIX}*"


def video_channel(video_id: int) -> str:
    return f"{VIDEO_CHANNEL_PREFIX}{int(video_id)}"


def notification_channel(user_id: int) -> str:
    return f"{NOTIFICATION_CHANNEL_PREFIX}{int(user_id)}"


def channel_matches(pattern: str, channel: str) -> bool:
    """grant 패턴(video.* 등) 매칭. 와일드카드 없는 패턴은 정확히 일치해야 함."""
    return fnmatchcase(channel, pattern)
