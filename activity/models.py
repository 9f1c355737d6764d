"""Activity models: course announcements and per-user notifications."""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Announcement(models.Model):
    """A course-wide notice posted by the course's teacher."""

    course = models.ForeignKey("courses.Course", on_delete=models.CASCADE, related_name="announcements")
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="announcements")
    title = models.CharField(max_length=200)
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.course_id}:{self.title[:20]}"


class Notification(models.Model):
    TYPE_ENROLMENT = "enrolment"
    TYPE_MATERIAL = "material"
    TYPE_ANNOUNCEMENT = "announcement"
    TYPE_CHOICES = (
        (TYPE_ENROLMENT, "Enrolment"),
        (TYPE_MATERIAL, "Material"),
        (TYPE_ANNOUNCEMENT, "Announcement"),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    actor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="notifications_actor")
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    course = models.ForeignKey("courses.Course", on_delete=models.CASCADE, null=True, blank=True, related_name="notifications")
    message = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)
    read = models.BooleanField(default=False, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.user_id}:{self.type}:{self.message[:20]}"
