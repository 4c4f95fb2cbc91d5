# PATH: apps/support/realtime/grants.py
"""
Access Grant Manager

- 사용자별: auth key 발급 → notifications.<user_id> rw 권한 (ttl=0)
- 프로세스 기동 시 1회(bootstrap):
    video.*          : 익명 read
    video.*          : 서비스 키 rw
    notifications.*  : 서비스 키 rw

grant 실패는 로그만 남긴다 (이미 저장된 User는 되돌리지 않음).
"""
from __future__ import annotations

import logging
import secrets

from apps.support.realtime.channels import (
    NOTIFICATION_CHANNEL_PATTERN,
    VIDEO_CHANNEL_PATTERN,
    notification_channel,
)
from src.application.ports.event_bus import EventBusError, IEventBus

logger = logging.getLogger(__name__)

UNLIMITED_TTL = 0


def generate_auth_key() -> str:
    return secrets.token_hex(16)


def assign_realtime_auth_key(user) -> bool:
    """
    생성 직후 1회 발급. 이미 키가 있으면 건드리지 않는다.
    whole-row save 대신 column 조건부 UPDATE.
    """
    from apps.core.models import User

    if user.realtime_auth_key:
        return True

    auth_key = generate_auth_key()
    updated = User.objects.filter(pk=user.pk, realtime_auth_key="").update(realtime_auth_key=auth_key)
    if not updated:
        logger.warning("AUTH_KEY_SKIP user_id=%s reason=already_assigned", user.pk)
        user.refresh_from_db(fields=["realtime_auth_key"])
        return bool(user.realtime_auth_key)

    user.realtime_auth_key = auth_key
    return True


def grant_user_channel(bus: IEventBus, *, user_id: int, auth_key: str) -> bool:
    channel = notification_channel(user_id)
    try:
        bus.grant(channel, read=True, write=True, auth_key=auth_key, ttl=UNLIMITED_TTL)
    except EventBusError:
        logger.exception("GRANT_FAILED channel=%s user_id=%s", channel, user_id)
        return False
    return True


def bootstrap_grants(bus: IEventBus, *, service_auth_key: str) -> int:
    """
    기본 권한 부여. 반환: 성공한 grant 개수.
    service_auth_key가 비어 있으면 익명 read만 부여한다.
    """
    plan = [
        (VIDEO_CHANNEL_PATTERN, True, False, None),
    ]
    if service_auth_key:
        plan += [
            (VIDEO_CHANNEL_PATTERN, True, True, service_auth_key),
            (NOTIFICATION_CHANNEL_PATTERN, True, True, service_auth_key),
        ]
    else:
        logger.warning("REALTIME_SERVICE_AUTH_KEY empty: service grants skipped")

    granted = 0
    for channel, read, write, auth_key in plan:
        try:
            bus.grant(channel, read=read, write=write, auth_key=auth_key, ttl=UNLIMITED_TTL)
            granted += 1
        except EventBusError:
            logger.exception("GRANT_FAILED channel=%s read=%s write=%s", channel, read, write)

    logger.info("REALTIME_BOOTSTRAP granted=%s/%s", granted, len(plan))
    return granted
