"""
Event Bus Port (인터페이스)

pub/sub 전송 + 채널 단위 접근 권한(grant).
서비스(Publication/Engagement/Grant)는 이 포트만 의존하고, 구현체는 프로세스 시작 시 1회 생성해 주입한다.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

READ = "read"
WRITE = "write"


class EventBusError(RuntimeError):
    """publish/grant 실패. 호출부는 로그만 남기고 이미 저장된 상태를 되돌리지 않는다."""
    pass


class IEventBus(ABC):
    """Event Bus 추상 인터페이스"""

    @abstractmethod
    def publish(self, channel: str, message: dict[str, Any]) -> None:
        """채널에 메시지 발행 (실패 시 EventBusError)"""
        pass

    @abstractmethod
    def grant(
        self,
        channel: str,
        *,
        read: bool,
        write: bool,
        auth_key: Optional[str] = None,
        ttl: int = 0,
    ) -> None:
        """
        채널(패턴) 접근 권한 부여.

        - auth_key=None: 인증 없는 모든 구독자 대상
        - ttl=0: 무기한, 그 외 초 단위
        - read=False, write=False: 권한 회수
        """
        pass

    @abstractmethod
    def is_authorized(self, channel: str, auth_key: Optional[str], access: str = READ) -> bool:
        """게이트웨이용: auth_key(또는 익명)가 channel에 access 권한이 있는지"""
        pass
