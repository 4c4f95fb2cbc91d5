from django.apps import AppConfig


class RealtimeConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.support.realtime"
    label = "realtime"

    def ready(self):
        from apps.support.realtime.bus import init_event_bus

        init_event_bus()
