"""
In-memory Event Bus — EVENT_BUS_BACKEND=memory 일 때 사용.

실제 구독자에게 전달하지 않고 발행 내용을 로그로 남기고 메모리에 기록한다.
개발/테스트 전용 (프로세스 간 공유되지 않음).
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Optional

from apps.support.realtime.channels import channel_matches
from src.application.ports.event_bus import WRITE, IEventBus

logger = logging.getLogger(__name__)


class InMemoryEventBus(IEventBus):

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self.published: list[tuple[str, dict[str, Any]]] = []
        # (auth_key or None, pattern) -> (flags, expires_at)
        self.grants: dict[tuple[Optional[str], str], tuple[str, Optional[float]]] = {}

    def publish(self, channel: str, message: dict[str, Any]) -> None:
        with self._lock:
            self.published.append((channel, dict(message)))
        logger.info(
            "[MemoryEventBus] publish 스킵 (구독자 없음) channel=%s\n%s",
            channel,
            json.dumps(message, ensure_ascii=False, default=str),
        )

    def grant(
        self,
        channel: str,
        *,
        read: bool,
        write: bool,
        auth_key: Optional[str] = None,
        ttl: int = 0,
    ) -> None:
        key = (auth_key or None, channel)
        with self._lock:
            if not read and not write:
                self.grants.pop(key, None)
                return
            flags = ("r" if read else "") + ("w" if write else "")
            expires_at = self._clock() + int(ttl) if ttl and int(ttl) > 0 else None
            self.grants[key] = (flags, expires_at)

    def is_authorized(self, channel: str, auth_key: Optional[str], access: str = "read") -> bool:
        flag = "w" if access == WRITE else "r"
        subjects = {None, auth_key or None}
        now = self._clock()
        with self._lock:
            for (subject, pattern), (flags, expires_at) in self.grants.items():
                if subject not in subjects:
                    continue
                if expires_at is not None and expires_at <= now:
                    continue
                if flag in flags and channel_matches(pattern, channel):
                    return True
        return False

    def messages_for(self, channel: str) -> list[dict[str, Any]]:
        """테스트용: 채널별 발행 메시지 (발행 순서)"""
        with self._lock:
            return [m for c, m in self.published if c == channel]
