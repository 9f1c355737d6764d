from __future__ import annotations

import pytest
from django.db import IntegrityError

from accounts.models import Role
from courses.models import Course, Enrolment, EnrolmentStatus, Group


@pytest.mark.django_db
def test_enrolment_unique_constraint_raises_integrity_error(course, student):
    Enrolment.objects.create(course=course, student=student)
    with pytest.raises(IntegrityError):
        Enrolment.objects.create(course=course, student=student)


@pytest.mark.django_db
def test_group_name_unique_per_course(course, teacher):
    Group.objects.create(course=course, name="A")
    Group.objects.create(course=Course.objects.create(owner=teacher, title="Other"), name="A")
    with pytest.raises(IntegrityError):
        Group.objects.create(course=course, name="A")


@pytest.mark.django_db
def test_enrolment_key_generated(teacher):
    a = Course.objects.create(owner=teacher, title="A")
    b = Course.objects.create(owner=teacher, title="B")
    assert a.enrolment_key and b.enrolment_key
    assert a.enrolment_key != b.enrolment_key


@pytest.mark.django_db
def test_set_status_stamps_times(course, teacher, enrolled):
    e = Enrolment.objects.get(course=course, student=enrolled)
    e.set_status(EnrolmentStatus.RESTRICTED, teacher)
    e.refresh_from_db()
    assert e.status == EnrolmentStatus.RESTRICTED
    assert e.blocked_at is not None and e.reactivated_at is None
    assert not course.has_active_enrolment(enrolled)
    assert not course.can_view(enrolled)
    e.set_status(EnrolmentStatus.ACTIVE, teacher)
    e.refresh_from_db()
    assert e.reactivated_at is not None and e.blocked_at is None
    assert course.can_view(enrolled)


@pytest.mark.django_db
def test_active_student_ids_by_group(course, teacher, user_factory):
    s1, s2, s3 = (user_factory(f"g{i}", Role.STUDENT) for i in range(3))
    g = Group.objects.create(course=course, name="A")
    Enrolment.objects.create(course=course, student=s1, group=g)
    Enrolment.objects.create(course=course, student=s2)
    Enrolment.objects.create(course=course, student=s3, group=g, status=EnrolmentStatus.BLOCKED)
    assert course.active_student_ids() == [s1.pk, s2.pk]
    assert course.active_student_ids(group=g) == [s1.pk]
