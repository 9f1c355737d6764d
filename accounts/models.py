"""Accounts models: user profile and roles.

Defines a `UserProfile` associated one-to-one with Django's `User`,
capturing the platform role (student/teacher). The profile is created
automatically on user creation (see `accounts.signals`).
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Role(models.TextChoices):
    """Platform roles used for role-based guards in the API."""

    STUDENT = "student", "Student"
    TEACHER = "teacher", "Teacher"


class UserProfile(models.Model):
    """Profile linked to a Django auth user.

    - `role`: gate for teacher-only and student-only operations
    - `student_number`: assigned automatically for students
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.STUDENT)

    full_name = models.CharField(max_length=200, blank=True)
    student_number = models.CharField(max_length=50, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover
        return f"Profile<{self.user.username}:{self.role}>"

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT


def role_of(user) -> str | None:
    """Return the role of `user`, or None for anonymous/profile-less users."""
    if not getattr(user, "is_authenticated", False):
        return None
    profile = getattr(user, "profile", None)
    return getattr(profile, "role", None)
