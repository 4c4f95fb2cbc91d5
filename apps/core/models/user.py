from django.contrib.auth.models import AbstractUser, Group, Permission
from django.db import models

from apps.support.realtime.channels import notification_channel


# --------------------------------------------------
# Custom User (AUTH_USER_MODEL)
# --------------------------------------------------

class User(AbstractUser):
    """
    Custom User 모델
    - AUTH_USER_MODEL = core.User
    - 인증/세션은 Django auth에 위임
    - realtime_auth_key: 개인 알림 채널(notifications.<id>) 구독용 Event Bus auth key.
      생성 직후 1회 발급 (apps.core.signals)
    """

    realtime_auth_key = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Event Bus auth key for the private notification channel",
    )

    # auth.User 와 reverse accessor 충돌 방지
    groups = models.ManyToManyField(
        Group,
        related_name="core_users",
        blank=True,
    )
    user_permissions = models.ManyToManyField(
        Permission,
        related_name="core_users",
        blank=True,
    )

    class Meta:
        app_label = "core"
        db_table = "accounts_user"
        ordering = ["-id"]

    def __str__(self):
        return self.username

    @property
    def notification_channel(self) -> str:
        return notification_channel(self.id)
