# PATH: apps/support/realtime/management/commands/bootstrap_realtime_grants.py
"""
Event Bus 기본 권한 부여 (서비스 기동 시 1회, 워커는 worker_ready에서 자동 실행)

  python manage.py bootstrap_realtime_grants
"""
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.support.realtime.bus import get_event_bus
from apps.support.realtime.grants import bootstrap_grants


class Command(BaseCommand):
    help = "Grant baseline Event Bus access (public video.* read, service rw)"

    def handle(self, *args, **options):
        service_key = settings.REALTIME_SERVICE_AUTH_KEY
        granted = bootstrap_grants(get_event_bus(), service_auth_key=service_key)
        expected = 3 if service_key else 1

        if granted < expected:
            raise CommandError(f"bootstrap incomplete: granted={granted}/{expected}")

        self.stdout.write(self.style.SUCCESS(f"Done: granted={granted}"))
