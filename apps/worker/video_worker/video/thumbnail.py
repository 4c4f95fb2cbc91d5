from __future__ import annotations

from pathlib import Path

from apps.worker.video_worker.utils import ensure_dir
from apps.worker.video_worker.video.transcoder import TranscodeError, run_ffmpeg


class ThumbnailError(TranscodeError):
    pass


def _timestamp(seconds: float) -> str:
    # 1.0 -> "00:00:01.000"
    total_ms = int(round(max(0.0, seconds) * 1000))
    h, rem = divmod(total_ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms = divmod(rem, 1000)
    return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"


def build_thumbnail_command(
    *,
    input_path: str,
    output_path: Path,
    ffmpeg_bin: str,
    at_seconds: float,
    width: int,
    height: int,
) -> list[str]:
    return [
        ffmpeg_bin,
        "-y",
        "-ss", _timestamp(at_seconds),
        "-i", input_path,
        "-frames:v", "1",
        # 비율 무시하고 고정 크기
        "-vf", f"scale={int(width)}:{int(height)}",
        str(output_path),
    ]


def generate_thumbnail(
    *,
    input_path: str,
    output_path: Path,
    ffmpeg_bin: str,
    at_seconds: float,
    width: int,
    height: int,
    timeout: int,
) -> Path:
    ensure_dir(output_path.parent)

    cmd = build_thumbnail_command(
        input_path=input_path,
        output_path=output_path,
        ffmpeg_bin=ffmpeg_bin,
        at_seconds=at_seconds,
        width=width,
        height=height,
    )

    try:
        run_ffmpeg(cmd, timeout=timeout, label="thumbnail")
    except TranscodeError as e:
        raise ThumbnailError(str(e)) from e

    if not output_path.exists() or output_path.stat().st_size == 0:
        raise ThumbnailError(f"thumbnail not created: {output_path}")

    return output_path
