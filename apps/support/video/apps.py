from django.apps import AppConfig


class VideoConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.support.video"
    label = "video"

    def ready(self):
        from apps.support.video import signals  # noqa: F401
