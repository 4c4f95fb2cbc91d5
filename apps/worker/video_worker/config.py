from __future__ import annotations

import os
from dataclasses import dataclass


def _float(name: str, default: str) -> float:
    try:
        return float(os.environ.get(name, default))
    except Exception:
        return float(default)


def _int(name: str, default: str) -> int:
    try:
        return int(os.environ.get(name, default))
    except Exception:
        return int(default)


def _size(name: str, default: str) -> tuple[int, int]:
    # "250x150" 형태
    raw = os.environ.get(name, default)
    try:
        w, h = raw.lower().split("x", 1)
        return int(w), int(h)
    except Exception:
        w, h = default.split("x", 1)
        return int(w), int(h)


@dataclass(frozen=True)
class Config:
    # Temp (job 실행마다 고유 디렉터리를 이 아래에 만든다)
    TEMP_DIR: str

    # ffmpeg / ffprobe
    FFMPEG_BIN: str
    FFPROBE_BIN: str
    FFPROBE_TIMEOUT_SECONDS: int
    FFMPEG_TIMEOUT_SECONDS: int

    # thumbnail
    THUMBNAIL_AT_SECONDS: float
    THUMBNAIL_WIDTH: int
    THUMBNAIL_HEIGHT: int


def load_config() -> Config:
    thumb_w, thumb_h = _size("THUMBNAIL_SIZE", "250x150")
    return Config(
        TEMP_DIR=os.environ.get("VIDEO_WORKER_TEMP_DIR", "/tmp/video-worker"),

        FFMPEG_BIN=os.environ.get("FFMPEG_BIN", "ffmpeg"),
        FFPROBE_BIN=os.environ.get("FFPROBE_BIN", "ffprobe"),
        FFPROBE_TIMEOUT_SECONDS=_int("FFPROBE_TIMEOUT_SECONDS", "60"),
        FFMPEG_TIMEOUT_SECONDS=_int("FFMPEG_TIMEOUT_SECONDS", "3600"),  # 1h default

        THUMBNAIL_AT_SECONDS=_float("THUMBNAIL_AT_SECONDS", "1.0"),
        THUMBNAIL_WIDTH=thumb_w,
        THUMBNAIL_HEIGHT=thumb_h,
    )
