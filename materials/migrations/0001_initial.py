from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion

import materials.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("courses", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Material",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("material_type", models.CharField(choices=[("video", "Video"), ("mcq_test", "MCQ test"), ("listening_test", "Listening test"), ("pdf", "PDF"), ("notice", "Notice"), ("text", "Text")], default="pdf", max_length=20)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("order_index", models.IntegerField(default=0)),
                ("video_url", models.URLField(blank=True)),
                ("file", models.FileField(blank=True, upload_to="materials/", validators=[materials.models.validate_upload])),
                ("text_content", models.TextField(blank=True)),
                ("size_bytes", models.PositiveIntegerField(default=0)),
                ("mime", models.CharField(blank=True, max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("course", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="materials", to="courses.course")),
                ("uploaded_by", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="materials", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["order_index", "id"],
            },
        ),
        migrations.CreateModel(
            name="PdfDownload",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("material", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="downloads", to="materials.material")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="pdf_downloads", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="VideoProgress",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("watch_time", models.PositiveIntegerField(default=0)),
                ("completed", models.BooleanField(default=False)),
                ("last_watched_at", models.DateTimeField(auto_now=True)),
                ("material", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="progress", to="materials.material")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="video_progress", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "unique_together": {("material", "student")},
            },
        ),
    ]
