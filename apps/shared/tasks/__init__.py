# apps/shared/tasks/__init__.py

from .media import (
    cut_video_thumbnail,
    encode_mp4_rendition,
    encode_ogv_rendition,
    encode_webm_rendition,
    probe_video_metadata,
    sweep_unpublished,
)

__all__ = [
    "encode_mp4_rendition",
    "encode_ogv_rendition",
    "encode_webm_rendition",
    "cut_video_thumbnail",
    "probe_video_metadata",
    "sweep_unpublished",
]
