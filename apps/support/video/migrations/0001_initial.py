import apps.support.video.utils
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Video",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "source_file",
                    models.FileField(
                        upload_to="videos/source/%Y/%m/%d/",
                        validators=[apps.support.video.utils.validate_video_content_type],
                    ),
                ),
                ("mp4_file", models.FileField(blank=True, default="", upload_to="videos/mp4/")),
                ("ogv_file", models.FileField(blank=True, default="", upload_to="videos/ogv/")),
                ("webm_file", models.FileField(blank=True, default="", upload_to="videos/webm/")),
                ("thumbnail", models.ImageField(blank=True, default="", upload_to="thumbnails/")),
                ("technical_metadata", models.JSONField(blank=True, null=True)),
                ("published", models.BooleanField(db_index=True, default=False)),
                ("likes", models.IntegerField(default=0)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="videos",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-id"],
                "indexes": [models.Index(fields=["published", "updated_at"], name="video_published_updated_idx")],
            },
        ),
    ]
