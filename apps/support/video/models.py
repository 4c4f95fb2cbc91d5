from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from apps.core.models.base import TimestampModel
from apps.support.realtime.channels import video_channel
from apps.support.video.constants import RENDITION_FIELDS
from apps.support.video.utils import validate_video_content_type


def readiness_q() -> Q:
    """publish 가능 조건: mp4/ogv/webm 3개 rendition 모두 존재 (thumbnail 제외)"""
    q = Q()
    for field in RENDITION_FIELDS:
        q &= Q(**{f"{field}__isnull": False}) & ~Q(**{field: ""})
    return q


class VideoQuerySet(models.QuerySet):
    def published(self):
        return self.filter(published=True)

    def unpublished(self):
        return self.filter(published=False)

    def ready_for_publication(self):
        return self.unpublished().filter(readiness_q())


# ========================================================
# Video
# ========================================================

class Video(TimestampModel):
    """
    업로드 원본 + Worker가 채우는 파생 미디어(rendition 3종, thumbnail).

    ⚠️ 동시성: 각 필드는 서로 다른 Worker가 병렬로 쓴다.
    - 생성 이후 변경은 QuerySet.update (column 단위) 로만 한다.
    - 로드한 인스턴스를 save() 하면 다른 Worker가 커밋한 필드를 덮어쓸 수 있음.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="videos",
    )

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")

    # ===============================
    # 원본 (Source of Truth)
    # ===============================
    source_file = models.FileField(
        upload_to="videos/source/%Y/%m/%d/",
        validators=[validate_video_content_type],
    )

    # ===============================
    # Worker 결과 (필드당 Worker 1개)
    # ===============================
    mp4_file = models.FileField(upload_to="videos/mp4/", blank=True, default="")
    ogv_file = models.FileField(upload_to="videos/ogv/", blank=True, default="")
    webm_file = models.FileField(upload_to="videos/webm/", blank=True, default="")
    thumbnail = models.ImageField(upload_to="thumbnails/", blank=True, default="")

    # ffprobe 결과 {"general": {...}, "video": {...}, "audio": {...}}
    technical_metadata = models.JSONField(null=True, blank=True)

    # false → true 1회만 (VideoPublisher의 조건부 UPDATE)
    published = models.BooleanField(default=False, db_index=True)

    likes = models.IntegerField(default=0)

    objects = VideoQuerySet.as_manager()

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["published", "updated_at"], name="video_published_updated_idx"),
        ]

    def __str__(self):
        state = "published" if self.published else "pending"
        return f"[{state}] {self.name}"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_owner_id = instance.__dict__.get("owner_id")
        return instance

    def save(self, *args, **kwargs):
        # owner는 생성 이후 불변
        loaded_owner_id = getattr(self, "_loaded_owner_id", None)
        if self.pk and loaded_owner_id is not None and self.owner_id != loaded_owner_id:
            raise ValidationError({"owner": "Video owner cannot be changed."})
        super().save(*args, **kwargs)
        # INSERT 직후 인스턴스도 기준값 보유
        self._loaded_owner_id = self.owner_id

    @property
    def video_channel(self) -> str:
        return video_channel(self.id)

    @property
    def is_ready_for_publication(self) -> bool:
        return all(bool(getattr(self, f)) for f in RENDITION_FIELDS)
