# PATH: apps/support/video/management/commands/sweep_unpublished_videos.py
"""
Completion Sweep 수동 실행 (평소에는 Celery beat가 매 분 실행)

  python manage.py sweep_unpublished_videos
  python manage.py sweep_unpublished_videos --dry-run
"""
from django.core.management.base import BaseCommand

from apps.support.realtime.bus import get_event_bus
from apps.support.video.services.sweeper import sweep_unpublished_videos


class Command(BaseCommand):
    help = "Publish unpublished videos whose mp4/ogv/webm renditions all exist"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only list videos that would be published",
        )

    def handle(self, *args, **options):
        dry_run = options.get("dry_run", False)
        report = sweep_unpublished_videos(bus=get_event_bus(), dry_run=dry_run)

        if dry_run:
            for video_id in report.candidates:
                self.stdout.write(f"DRY-RUN PUBLISH | video_id={video_id}")
            self.stdout.write(self.style.SUCCESS(f"Done: candidates={len(report.candidates)} (dry-run)"))
            return

        for video_id in report.published:
            self.stdout.write(self.style.SUCCESS(f"PUBLISHED | video_id={video_id}"))
        for video_id in report.failed:
            self.stdout.write(self.style.WARNING(f"FAILED | video_id={video_id}"))

        self.stdout.write(
            self.style.SUCCESS(
                f"Done: published={len(report.published)} skipped={len(report.skipped)} failed={len(report.failed)}"
            )
        )
