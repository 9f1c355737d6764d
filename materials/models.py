"""Course materials, viewing progress and download tracking.

A `Material` is one item on a course page: a video, a PDF, a notice or a
text block, or an assessment (MCQ test or listening test) whose questions
live in the `assessments` app. Uploads are limited to 25 MB and a small set
of MIME types / extensions.
"""
from __future__ import annotations

import mimetypes
from pathlib import Path

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from courses.models import Course


ALLOWED_MIME = {
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/webp",
}
ALLOWED_EXT = {".pdf", ".jpg", ".jpeg", ".png", ".webp"}
MAX_BYTES = 25 * 1024 * 1024


def validate_upload(file) -> None:
    """Validate file size and a conservative type check.

    Uses the uploaded size and extension, plus a MIME guess from the file
    name as an additional hint (no libmagic dependency).
    """
    size = getattr(file, "size", None)
    if size is not None and size > MAX_BYTES:
        raise ValidationError("File too large (max 25 MB)")
    ext = Path(getattr(file, "name", "")).suffix.lower()
    if ext not in ALLOWED_EXT:
        raise ValidationError("Unsupported file type")
    guessed, _ = mimetypes.guess_type(getattr(file, "name", ""))
    if guessed and guessed not in ALLOWED_MIME:
        raise ValidationError("Unsupported MIME type")


class MaterialType(models.TextChoices):
    VIDEO = "video", "Video"
    MCQ_TEST = "mcq_test", "MCQ test"
    LISTENING_TEST = "listening_test", "Listening test"
    PDF = "pdf", "PDF"
    NOTICE = "notice", "Notice"
    TEXT = "text", "Text"


ASSESSMENT_TYPES = (MaterialType.MCQ_TEST, MaterialType.LISTENING_TEST)
WATCHABLE_TYPES = (MaterialType.VIDEO, MaterialType.LISTENING_TEST)


class Material(models.Model):
    """An item attached to a course by its teacher."""

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="materials")
    uploaded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="materials")
    material_type = models.CharField(max_length=20, choices=MaterialType.choices, default=MaterialType.PDF)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    order_index = models.IntegerField(default=0)
    video_url = models.URLField(blank=True)
    file = models.FileField(upload_to="materials/", validators=[validate_upload], blank=True)
    text_content = models.TextField(blank=True)
    size_bytes = models.PositiveIntegerField(default=0)
    mime = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order_index", "id"]

    def save(self, *args, **kwargs):
        # Derive size and MIME on save for display and quick checks.
        if self.file:
            self.mime = mimetypes.guess_type(self.file.name)[0] or ""
            try:
                self.size_bytes = self.file.size or 0
            except OSError:
                # Registered by name only; nothing in storage to measure
                pass
        super().save(*args, **kwargs)

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.title} ({self.material_type}, course {self.course_id})"

    @property
    def is_assessment(self) -> bool:
        return self.material_type in ASSESSMENT_TYPES


class VideoProgress(models.Model):
    """Per-student watch progress on a video or listening-test video."""

    material = models.ForeignKey(Material, on_delete=models.CASCADE, related_name="progress")
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="video_progress")
    watch_time = models.PositiveIntegerField(default=0)  # seconds
    completed = models.BooleanField(default=False)
    last_watched_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("material", "student")

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.student_id}@{self.material_id}: {self.watch_time}s"


class PdfDownload(models.Model):
    """One download of a PDF material by a student (append-only)."""

    material = models.ForeignKey(Material, on_delete=models.CASCADE, related_name="downloads")
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="pdf_downloads")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
