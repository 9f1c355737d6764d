"""Signals for automatic profile management.

On user creation, create a default `UserProfile` with the student role.
Role changes happen afterwards by updating the profile.
"""
from django.contrib.auth.models import User
from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from .models import UserProfile, Role


def _student_number(user_id: int) -> str:
    return f"S{user_id:07d}"


@receiver(post_save, sender=User)
def create_user_profile(sender, instance: User, created: bool, **kwargs):  # noqa: D401
    """Create a profile for new users (default role: student)."""
    if created:
        UserProfile.objects.create(user=instance, role=Role.STUDENT, student_number=_student_number(instance.id))


@receiver(pre_save, sender=UserProfile)
def ensure_student_number(sender, instance: UserProfile, **kwargs):  # noqa: D401
    """Ensure students always have a student_number assigned.

    If a profile transitions to the student role and the number is empty,
    assign a deterministic value based on the user id.
    """
    if instance.role == Role.STUDENT and not instance.student_number and instance.user_id:
        instance.student_number = _student_number(instance.user_id)
