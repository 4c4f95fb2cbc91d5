"""
Redis 클라이언트

URL 단위로 프로세스당 1개 클라이언트를 재사용한다.
생성 시 연결하지 않음 (첫 명령에서 연결) → 장애는 호출부에서 RedisError로 드러난다.
"""

from __future__ import annotations

import logging
import threading

import redis

logger = logging.getLogger(__name__)

_clients: dict[str, redis.Redis] = {}
_lock = threading.Lock()


def get_redis_client(url: str) -> redis.Redis:
    """url 기준 Redis 클라이언트 반환 (decode_responses=True)."""
    with _lock:
        client = _clients.get(url)
        if client is not None:
            return client

        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
            health_check_interval=30,
        )
        _clients[url] = client
        logger.info("Redis client created: %s", _redact(url))
        return client


def _redact(url: str) -> str:
    # redis://:password@host:port/db → redis://***@host:port/db
    if "@" not in url:
        return url
    scheme, _, rest = url.partition("://")
    return f"{scheme}://***@{rest.split('@', 1)[1]}"


def reset_redis_clients() -> None:
    """테스트용: 클라이언트 캐시 리셋"""
    with _lock:
        _clients.clear()
