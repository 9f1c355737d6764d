"""Courses, groups and enrolments.

A `Course` is owned by a teacher. Students join with the course's
enrolment key; the teacher may then block/restrict them or place them in
a `Group`. Only *active* enrolments grant access to course content.
"""
from __future__ import annotations

import logging
import secrets

from django.conf import settings
from django.db import models
from django.utils import timezone

logger = logging.getLogger(__name__)


def generate_enrolment_key() -> str:
    return secrets.token_urlsafe(6)


class Course(models.Model):
    """A course authored by a teacher user."""

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="owned_courses")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    enrolment_key = models.CharField(max_length=64, default=generate_enrolment_key)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.title}"

    def is_owner(self, user) -> bool:
        return bool(user and user.is_authenticated and self.owner_id == user.id)

    def has_active_enrolment(self, user) -> bool:
        if not getattr(user, "is_authenticated", False):
            return False
        return self.enrolments.filter(student=user, status=EnrolmentStatus.ACTIVE).exists()

    def can_view(self, user) -> bool:
        return self.is_owner(user) or self.has_active_enrolment(user)

    def active_student_ids(self, group: Group | None = None) -> list[int]:
        qs = self.enrolments.filter(status=EnrolmentStatus.ACTIVE)
        if group is not None:
            qs = qs.filter(group=group)
        return list(qs.order_by("created_at", "id").values_list("student_id", flat=True))


class Group(models.Model):
    """A named subset of a course's students (e.g. a class section)."""

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="groups")
    name = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["course", "name"], name="uniq_group_name_per_course"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} ({self.course_id})"


class EnrolmentStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    BLOCKED = "blocked", "Blocked"
    RESTRICTED = "restricted", "Restricted"


class Enrolment(models.Model):
    """Link a student to a course.

    Uniqueness of (course, student) is enforced by the database and also
    checked in the API serializer to return a readable 400.
    """

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="enrolments")
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="enrolments")
    group = models.ForeignKey(Group, on_delete=models.SET_NULL, null=True, blank=True, related_name="enrolments")
    status = models.CharField(max_length=16, choices=EnrolmentStatus.choices, default=EnrolmentStatus.ACTIVE, db_index=True)
    status_changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    blocked_at = models.DateTimeField(null=True, blank=True)
    reactivated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("course", "student")
        ordering = ["course_id", "student_id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.student_id}->{self.course_id} ({self.status})"

    def set_status(self, status: str, changed_by) -> None:
        """Change the enrolment status and stamp the matching timestamp."""
        now = timezone.now()
        self.status = status
        self.status_changed_by = changed_by
        if status in (EnrolmentStatus.BLOCKED, EnrolmentStatus.RESTRICTED):
            self.blocked_at = now
            self.reactivated_at = None
        else:
            self.reactivated_at = now
            self.blocked_at = None
        self.save(update_fields=["status", "status_changed_by", "blocked_at", "reactivated_at"])
        logger.info("Enrolment %s set to %s by user %s", self.pk, status, getattr(changed_by, "pk", None))
