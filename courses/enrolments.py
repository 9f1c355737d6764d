"""Enrolment operations shared by the API layer.

Students join a course with its enrolment key; the course owner manages
status and group membership afterwards.
"""
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from accounts.models import Role, role_of
from assessments.exceptions import AuthorizationError, ValidationError
from .models import Course, Enrolment, EnrolmentStatus, Group

logger = logging.getLogger(__name__)

_UNSET = object()


def enrol_student(course: Course, student, enrolment_key: str | None) -> Enrolment:
    if role_of(student) != Role.STUDENT:
        raise AuthorizationError("Only students can enrol.")
    if (enrolment_key or "").strip() != course.enrolment_key:
        raise ValidationError("Invalid enrolment key")
    if Enrolment.objects.filter(course=course, student=student).exists():
        raise ValidationError("Already enrolled in this course")
    try:
        with transaction.atomic():
            enrolment = Enrolment.objects.create(course=course, student=student)
    except IntegrityError as exc:
        # Lost a race with a concurrent enrolment of the same student
        raise ValidationError("Already enrolled in this course") from exc
    logger.info("Student %s enrolled in course %s", student.pk, course.pk)
    return enrolment


def update_enrolment(enrolment: Enrolment, actor, status: str | None = None, group=_UNSET) -> Enrolment:
    """Change status and/or group of an enrolment; owner only.

    Pass `group=None` to remove the student from their group.
    """
    if not enrolment.course.is_owner(actor):
        raise AuthorizationError("Only the course owner can manage enrolments.")
    if group is not _UNSET:
        if group is not None and group.course_id != enrolment.course_id:
            raise ValidationError("Group must belong to this course.")
        enrolment.group = group
        enrolment.save(update_fields=["group"])
    if status is not None:
        if status not in EnrolmentStatus.values:
            raise ValidationError(f"Invalid status '{status}'.")
        if status != enrolment.status:
            enrolment.set_status(status, actor)
    return enrolment


def remove_enrolment(enrolment: Enrolment, actor) -> None:
    """Students may leave a course; owners may remove any student from theirs."""
    if enrolment.student_id != getattr(actor, "id", None) and not enrolment.course.is_owner(actor):
        raise AuthorizationError("Not permitted.")
    logger.info("Enrolment %s removed by user %s", enrolment.pk, actor.pk)
    enrolment.delete()


def create_group(course: Course, actor, name: str) -> Group:
    if not course.is_owner(actor):
        raise AuthorizationError("Only the course owner can manage groups.")
    name = (name or "").strip()
    if not name:
        raise ValidationError("Group name is required.")
    if Group.objects.filter(course=course, name=name).exists():
        raise ValidationError("A group with this name already exists in this course.")
    return Group.objects.create(course=course, name=name)


def rename_group(group: Group, actor, name: str) -> Group:
    if not group.course.is_owner(actor):
        raise AuthorizationError("Only the course owner can manage groups.")
    name = (name or "").strip()
    if not name:
        raise ValidationError("Group name is required.")
    if Group.objects.filter(course_id=group.course_id, name=name).exclude(pk=group.pk).exists():
        raise ValidationError("A group with this name already exists in this course.")
    group.name = name
    group.save(update_fields=["name"])
    return group
