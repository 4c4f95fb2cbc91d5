# PATH: apps/core/signals.py
from __future__ import annotations

import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.core.models import User
from apps.support.realtime.bus import get_event_bus
from apps.support.realtime.grants import assign_realtime_auth_key, grant_user_channel

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def bootstrap_user_realtime_access(sender, instance: User, created: bool, **kwargs):
    """
    User 생성 직후:
    1) realtime auth key 1회 발급 (column 단위 저장)
    2) commit 이후 notifications.<id> 채널 rw 권한 부여 (best-effort)
    """
    if not created:
        return

    if not assign_realtime_auth_key(instance):
        return

    user_id = instance.id
    auth_key = instance.realtime_auth_key

    def _grant():
        grant_user_channel(get_event_bus(), user_id=user_id, auth_key=auth_key)

    transaction.on_commit(_grant)
