from __future__ import annotations

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from courses.models import Enrolment
from materials.models import Material
from .models import Announcement, Notification

logger = logging.getLogger(__name__)


def _notify_active_students(course, actor, type_: str, message: str) -> int:
    student_ids = course.active_student_ids()
    if not student_ids:
        return 0
    Notification.objects.bulk_create(
        [
            Notification(user_id=sid, actor=actor, type=type_, course=course, message=message[:200])
            for sid in student_ids
        ]
    )
    return len(student_ids)


@receiver(post_save, sender=Enrolment)
def notify_enrolment(sender, instance: Enrolment, created: bool, **kwargs):
    if not created:
        return
    # Notify teacher (course owner) about the new enrolment
    course = instance.course
    student = instance.student
    Notification.objects.create(
        user=course.owner,
        actor=student,
        type=Notification.TYPE_ENROLMENT,
        course=course,
        message=f"New enrolment: {student.username} in {course.title}"[:200],
    )


@receiver(post_save, sender=Material)
def notify_material(sender, instance: Material, created: bool, **kwargs):
    if not created:
        return
    course = instance.course
    n = _notify_active_students(
        course, instance.uploaded_by, Notification.TYPE_MATERIAL, f"New material in {course.title}: {instance.title}"
    )
    logger.debug("Material %s: notified %d students", instance.pk, n)


@receiver(post_save, sender=Announcement)
def notify_announcement(sender, instance: Announcement, created: bool, **kwargs):
    if not created:
        return
    course = instance.course
    n = _notify_active_students(
        course, instance.author, Notification.TYPE_ANNOUNCEMENT, f"{course.title}: {instance.title}"
    )
    logger.info("Announcement %s in course %s sent to %d students", instance.pk, course.pk, n)
