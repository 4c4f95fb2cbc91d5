# PATH: apps/support/video/utils.py

from __future__ import annotations

import mimetypes

from django.core.exceptions import ValidationError

OMISSION = "..."


def truncate_name(name: str, length: int, omission: str = OMISSION) -> str:
    """
    length 초과 시 omission 포함 총 length 글자로 자른다.
    "A very long video title here" (20) -> "A very long video..."
    """
    text = name or ""
    if len(text) <= length:
        return text
    keep = max(0, length - len(omission))
    return f"{text[:keep]}{omission}"


def guess_content_type(name: str) -> str:
    ctype, _ = mimetypes.guess_type(name or "")
    return ctype or "application/octet-stream"


def validate_video_content_type(value) -> None:
    """원본 업로드는 video/* 만 허용 (파일명 기반 추정)."""
    name = getattr(value, "name", "") or ""
    if not guess_content_type(name).startswith("video/"):
        raise ValidationError(
            "Source file must be a video (got %(ctype)s).",
            code="invalid_content_type",
            params={"ctype": guess_content_type(name)},
        )
