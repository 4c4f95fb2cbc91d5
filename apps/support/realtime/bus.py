# PATH: apps/support/realtime/bus.py
"""
Event Bus 수명주기 (프로세스당 1개)

- init_event_bus(): 프로세스 시작 시 1회 (RealtimeConfig.ready)
- get_event_bus(): composition root(task/signal/command)에서 꺼내 서비스에 주입
- 재초기화 금지: 두 번째 init은 RuntimeError
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from django.conf import settings

from src.application.ports.event_bus import IEventBus

logger = logging.getLogger(__name__)

_event_bus: Optional[IEventBus] = None
_lock = threading.Lock()


def build_event_bus() -> IEventBus:
    """settings.EVENT_BUS_BACKEND 기준 구현체 생성 (연결은 첫 사용 시)."""
    backend = str(getattr(settings, "EVENT_BUS_BACKEND", "redis") or "redis").lower()

    if backend == "memory":
        from apps.support.realtime.memory_bus import InMemoryEventBus
        return InMemoryEventBus()

    if backend == "redis":
        from libs.redis.client import get_redis_client
        from src.infrastructure.realtime.redis_event_bus import RedisEventBus
        return RedisEventBus(get_redis_client(settings.EVENT_BUS_REDIS_URL))

    raise ValueError(f"Unknown EVENT_BUS_BACKEND: {backend}")


def init_event_bus(bus: Optional[IEventBus] = None) -> IEventBus:
    global _event_bus
    with _lock:
        if _event_bus is not None:
            raise RuntimeError("event bus already initialized")
        _event_bus = bus if bus is not None else build_event_bus()
        logger.info("Event bus initialized: %s", type(_event_bus).__name__)
        return _event_bus


def get_event_bus() -> IEventBus:
    bus = _event_bus
    if bus is None:
        raise RuntimeError("event bus not initialized (call init_event_bus() at process start)")
    return bus


def reset_event_bus() -> None:
    """테스트용: 초기화 상태 리셋"""
    global _event_bus
    with _lock:
        _event_bus = None
