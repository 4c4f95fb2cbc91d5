"""
RedisEventBus - IEventBus 구현체

- publish: Redis PUBLISH (JSON)
- grant: Redis에 권한 레코드 저장 (게이트웨이가 is_authorized로 조회)
    {prefix}:grant:{subject}:{pattern} = "r" | "w" | "rw"   (ttl>0이면 EX)
    {prefix}:grants:{subject}          = SET(pattern)         (subject별 인덱스)
  subject = auth_key, 익명은 "*"
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from redis.exceptions import RedisError

from apps.support.realtime.channels import channel_matches
from src.application.ports.event_bus import READ, WRITE, EventBusError, IEventBus

logger = logging.getLogger(__name__)

ANONYMOUS_SUBJECT = "*"
DEFAULT_KEY_PREFIX = "realtime"


class RedisEventBus(IEventBus):
    """IEventBus 구현 (Redis pub/sub + 권한 레코드)"""

    def __init__(self, client, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self._client = client
        self._prefix = key_prefix

    def _grant_key(self, subject: str, pattern: str) -> str:
        return f"{self._prefix}:grant:{subject}:{pattern}"

    def _index_key(self, subject: str) -> str:
        return f"{self._prefix}:grants:{subject}"

    def publish(self, channel: str, message: dict[str, Any]) -> None:
        payload = json.dumps(message, ensure_ascii=False, default=str)
        try:
            receivers = self._client.publish(channel, payload)
        except RedisError as e:
            raise EventBusError(f"publish failed channel={channel}: {e}") from e
        logger.debug("EVENT_PUBLISHED channel=%s receivers=%s payload=%s", channel, receivers, payload)

    def grant(
        self,
        channel: str,
        *,
        read: bool,
        write: bool,
        auth_key: Optional[str] = None,
        ttl: int = 0,
    ) -> None:
        subject = auth_key or ANONYMOUS_SUBJECT
        key = self._grant_key(subject, channel)
        index = self._index_key(subject)

        try:
            pipe = self._client.pipeline()
            if not read and not write:
                pipe.delete(key)
                pipe.srem(index, channel)
            else:
                flags = ("r" if read else "") + ("w" if write else "")
                if ttl and int(ttl) > 0:
                    pipe.set(key, flags, ex=int(ttl))
                else:
                    pipe.set(key, flags)
                pipe.sadd(index, channel)
            pipe.execute()
        except RedisError as e:
            raise EventBusError(f"grant failed channel={channel}: {e}") from e

        logger.info(
            "EVENT_GRANT channel=%s read=%s write=%s subject=%s ttl=%s",
            channel, read, write, "anonymous" if subject == ANONYMOUS_SUBJECT else "key", ttl,
        )

    def is_authorized(self, channel: str, auth_key: Optional[str], access: str = READ) -> bool:
        flag = "w" if access == WRITE else "r"
        subjects = [ANONYMOUS_SUBJECT]
        if auth_key:
            subjects.append(auth_key)

        try:
            for subject in subjects:
                index = self._index_key(subject)
                for pattern in self._client.smembers(index):
                    if not channel_matches(pattern, channel):
                        continue
                    flags = self._client.get(self._grant_key(subject, pattern))
                    if flags is None:
                        # TTL 만료된 grant → 인덱스 정리
                        self._client.srem(index, pattern)
                        continue
                    if flag in flags:
                        return True
        except RedisError as e:
            raise EventBusError(f"grant lookup failed channel={channel}: {e}") from e
        return False
