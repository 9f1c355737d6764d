from __future__ import annotations

import pytest

from assessments.exceptions import AuthorizationError, ValidationError
from courses.enrolments import create_group, enrol_student, remove_enrolment, rename_group, update_enrolment
from courses.models import Enrolment, EnrolmentStatus


@pytest.mark.django_db
def test_enrol_with_key(course, student):
    e = enrol_student(course, student, f"  {course.enrolment_key} ")
    assert e.status == EnrolmentStatus.ACTIVE
    with pytest.raises(ValidationError) as exc:
        enrol_student(course, student, course.enrolment_key)
    assert exc.value.message == "Already enrolled in this course"


@pytest.mark.django_db
def test_wrong_key_and_teacher_enrolment_rejected(course, student, teacher):
    with pytest.raises(ValidationError):
        enrol_student(course, student, "nope")
    with pytest.raises(AuthorizationError):
        enrol_student(course, teacher, course.enrolment_key)
    assert not Enrolment.objects.exists()


@pytest.mark.django_db
def test_update_enrolment_rejects_unknown_status(course, teacher, enrolled):
    e = Enrolment.objects.get(course=course, student=enrolled)
    with pytest.raises(ValidationError):
        update_enrolment(e, teacher, status="suspended")
    g = create_group(course, teacher, "Evening")
    update_enrolment(e, teacher, group=g)
    update_enrolment(e, teacher, group=None)
    e.refresh_from_db()
    assert e.group_id is None


@pytest.mark.django_db
def test_groups_rename_and_remove(course, teacher, enrolled, user_factory):
    a = create_group(course, teacher, "A")
    create_group(course, teacher, "B")
    with pytest.raises(ValidationError):
        rename_group(a, teacher, "B")
    assert rename_group(a, teacher, " C ").name == "C"

    stranger = user_factory("stranger")
    e = Enrolment.objects.get(course=course, student=enrolled)
    with pytest.raises(AuthorizationError):
        remove_enrolment(e, stranger)
    remove_enrolment(e, teacher)
    assert not Enrolment.objects.filter(pk=e.pk).exists()
