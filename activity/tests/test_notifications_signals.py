from __future__ import annotations

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from accounts.models import Role
from activity.models import Announcement, Notification
from courses.models import Course, Enrolment, EnrolmentStatus
from materials.models import Material


@pytest.mark.django_db
def test_enrolment_creates_notification_for_teacher(teacher, student, course):
    assert Notification.objects.filter(user=teacher).count() == 0
    Enrolment.objects.create(course=course, student=student)
    assert Notification.objects.filter(user=teacher, course=course, type=Notification.TYPE_ENROLMENT).count() == 1


@pytest.mark.django_db
def test_material_upload_notifies_only_active_students(teacher, course, user_factory):
    s1 = user_factory("s1", Role.STUDENT)
    s2 = user_factory("s2", Role.STUDENT)
    Enrolment.objects.create(course=course, student=s1)
    e2 = Enrolment.objects.create(course=course, student=s2)
    e2.set_status(EnrolmentStatus.BLOCKED, teacher)
    f = SimpleUploadedFile("doc.pdf", b"%PDF-1.4\n", content_type="application/pdf")
    Material.objects.create(course=course, uploaded_by=teacher, title="Doc", file=f)
    notes = Notification.objects.filter(course=course, type=Notification.TYPE_MATERIAL)
    assert list(notes.values_list("user_id", flat=True)) == [s1.pk]


@pytest.mark.django_db
def test_material_update_does_not_notify(teacher, course, enrolled):
    m = Material.objects.create(course=course, uploaded_by=teacher, material_type="notice", title="Hello")
    m.title = "Hello again"
    m.save()
    assert Notification.objects.filter(type=Notification.TYPE_MATERIAL).count() == 1


@pytest.mark.django_db
def test_announcement_notifies_active_students(teacher, course, enrolled):
    other = Course.objects.create(owner=teacher, title="Other")
    Announcement.objects.create(course=course, author=teacher, title="Exam moved", message="Now on Friday")
    notes = Notification.objects.filter(type=Notification.TYPE_ANNOUNCEMENT)
    assert notes.count() == 1
    n = notes.get()
    assert n.user_id == enrolled.pk
    assert "Exam moved" in n.message
    assert not Notification.objects.filter(course=other).exists()
