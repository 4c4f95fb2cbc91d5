"""
Video Repository Port (인터페이스)

Worker는 모델을 직접 부르지 않고 이 포트를 통해서만 Video를 읽고 쓴다.
쓰기는 모두 column 단위 (로드한 row 전체를 다시 저장하지 않음).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class SourceUnavailableError(RuntimeError):
    """원본을 읽을 수 없음 (Video 없음/원본 없음/파일 없음). 재시도 가치 없음."""
    pass


class IVideoRepository(ABC):
    """Video Repository 추상 인터페이스"""

    @abstractmethod
    def fetch_source(self, video_id: int, workdir: Path) -> Path:
        """
        원본을 읽을 수 있는 로컬 경로로 반환.
        로컬 storage면 그 경로, 아니면 workdir 안으로 복사한 경로.
        실패 시 SourceUnavailableError.
        """
        pass

    @abstractmethod
    def has_media(self, video_id: int, field: str) -> bool:
        """field(mp4_file 등)가 이미 채워져 있는지"""
        pass

    @abstractmethod
    def attach_media(self, video_id: int, field: str, path: Path, filename: str) -> bool:
        """
        결과 파일을 attachment store에 저장하고 field만 UPDATE.
        field가 비어 있을 때만 기록. 이미 채워져 있으면 저장한 파일을 지우고 False.
        """
        pass

    @abstractmethod
    def set_technical_metadata(self, video_id: int, data: dict[str, Any]) -> bool:
        """technical_metadata만 UPDATE"""
        pass
