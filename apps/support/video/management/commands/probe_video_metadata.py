# PATH: apps/support/video/management/commands/probe_video_metadata.py
"""
원본 ffprobe 정보(technical_metadata) 채우기

  python manage.py probe_video_metadata 12 13
  python manage.py probe_video_metadata --missing           # 비어 있는 Video 전부 enqueue
  python manage.py probe_video_metadata --missing --sync    # 현재 프로세스에서 바로 실행
"""
from django.core.management.base import BaseCommand, CommandError

from apps.shared.tasks.media import probe_video_metadata
from apps.support.video.models import Video


class Command(BaseCommand):
    help = "Extract container/codec/stream facts from source files into technical_metadata"

    def add_arguments(self, parser):
        parser.add_argument("video_ids", nargs="*", type=int)
        parser.add_argument(
            "--missing",
            action="store_true",
            help="Target every video without technical_metadata",
        )
        parser.add_argument(
            "--sync",
            action="store_true",
            help="Run in this process instead of enqueueing",
        )

    def handle(self, *args, **options):
        video_ids = list(options.get("video_ids") or [])
        if options.get("missing"):
            video_ids += list(
                Video.objects.filter(technical_metadata__isnull=True)
                .order_by("id")
                .values_list("id", flat=True)
            )
        video_ids = sorted(set(video_ids))

        if not video_ids:
            raise CommandError("No videos given (pass ids or --missing)")

        for video_id in video_ids:
            if options.get("sync"):
                ok = probe_video_metadata(video_id)
                self.stdout.write(f"{'PROBED' if ok else 'NOT_FOUND'} | video_id={video_id}")
            else:
                probe_video_metadata.delay(video_id)
                self.stdout.write(f"ENQUEUED | video_id={video_id}")

        self.stdout.write(self.style.SUCCESS(f"Done: videos={len(video_ids)}"))
