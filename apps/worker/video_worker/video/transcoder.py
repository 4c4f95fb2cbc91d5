# PATH: apps/worker/video_worker/video/transcoder.py

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from apps.support.video.constants import MediaKind
from apps.worker.video_worker.utils import ensure_dir, trim_tail

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Rendition profiles (포맷별 고정 파라미터)
# ---------------------------------------------------------------------

RENDITION_PROFILES = {
    # H.264 / AAC, strict 완화 (구버전 ffmpeg의 experimental aac encoder 허용)
    MediaKind.MP4: ["-f", "mp4", "-vcodec", "h264", "-acodec", "aac", "-strict", "-2"],
    # Theora / Vorbis, 고정 quality scale
    MediaKind.OGV: ["-codec:v", "libtheora", "-qscale:v", "7", "-codec:a", "libvorbis", "-qscale:a", "7"],
    # VP8 1Mbps / Vorbis
    MediaKind.WEBM: ["-f", "webm", "-c:v", "libvpx", "-b:v", "1M", "-c:a", "libvorbis"],
}


class TranscodeError(RuntimeError):
    pass


class TranscodeTimeoutError(TranscodeError):
    pass


def build_ffmpeg_command(
    *,
    kind: str,
    input_path: str,
    output_path: Path,
    ffmpeg_bin: str,
) -> List[str]:
    try:
        profile = RENDITION_PROFILES[kind]
    except KeyError:
        raise ValueError(f"unknown rendition kind: {kind}") from None

    return [
        ffmpeg_bin,
        "-y",
        "-i", input_path,
        *profile,
        str(output_path),
    ]


def run_ffmpeg(cmd: List[str], *, timeout: Optional[int], label: str) -> None:
    """
    ffmpeg 실행. exit 0 이외/timeout은 TranscodeError (Celery 재시도 대상).
    """
    logger.info("[TRANSCODER] Starting ffmpeg %s cmd=%s", label, " ".join(cmd[:4]) + "...")
    try:
        p = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise TranscodeTimeoutError(f"ffmpeg timeout {label} ({timeout}s)") from e
    except OSError as e:
        # ffmpeg 바이너리 없음/실행 불가
        raise TranscodeError(f"ffmpeg not runnable {label}: {e}") from e

    if p.returncode != 0:
        raise TranscodeError(
            f"ffmpeg failed {label} exit={p.returncode} stderr={trim_tail(p.stderr)}"
        )


def transcode_rendition(
    *,
    kind: str,
    input_path: str,
    output_path: Path,
    ffmpeg_bin: str,
    timeout: Optional[int],
) -> Path:
    ensure_dir(output_path.parent)

    cmd = build_ffmpeg_command(
        kind=kind,
        input_path=input_path,
        output_path=output_path,
        ffmpeg_bin=ffmpeg_bin,
    )
    run_ffmpeg(cmd, timeout=timeout, label=f"kind={kind}")

    if not output_path.exists() or output_path.stat().st_size == 0:
        raise TranscodeError(f"ffmpeg produced no output kind={kind} path={output_path}")

    return output_path
