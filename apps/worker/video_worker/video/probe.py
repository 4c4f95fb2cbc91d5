# PATH: apps/worker/video_worker/video/probe.py
#
# PURPOSE:
# - 로컬 영상 파일에서 ffprobe(JSON)로 컨테이너/코덱/스트림 정보 추출
# - 결과 형태: {"general": format, "video": 첫 video stream, "audio": 첫 audio stream}

from __future__ import annotations

import json
import subprocess
from typing import Any, Dict, Optional

from apps.worker.video_worker.utils import trim_tail


class ProbeError(RuntimeError):
    pass


def _first_stream(streams: list, codec_type: str) -> Optional[Dict[str, Any]]:
    for s in streams:
        if s.get("codec_type") == codec_type:
            return s
    return None


def parse_probe_output(raw: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw or "{}")
    except ValueError as e:
        raise ProbeError(f"ffprobe output is not JSON: {trim_tail(raw, 200)}") from e

    streams = data.get("streams") or []
    return {
        "general": data.get("format") or {},
        "video": _first_stream(streams, "video"),
        "audio": _first_stream(streams, "audio"),
    }


def probe_media_info(
    *,
    input_path: str,
    ffprobe_bin: str,
    timeout: int,
) -> Dict[str, Any]:
    cmd = [
        ffprobe_bin,
        "-v", "error",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        input_path,
    ]
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
        raise ProbeError(f"ffprobe timeout ({timeout}s)") from e
    except OSError as e:
        raise ProbeError(f"ffprobe not runnable: {e}") from e

    if p.returncode != 0:
        raise ProbeError(f"ffprobe failed exit={p.returncode} stderr={trim_tail(p.stderr)}")

    return parse_probe_output(p.stdout)
