from __future__ import annotations

import pytest
from django.contrib.auth.models import AnonymousUser, User

from accounts.models import Role, role_of


@pytest.mark.django_db
def test_new_user_gets_student_profile_with_number():
    u = User.objects.create_user(username="new", password="pw")
    assert u.profile.role == Role.STUDENT
    assert u.profile.is_student
    assert u.profile.student_number == f"S{u.id:07d}"


@pytest.mark.django_db
def test_role_of(teacher, student):
    assert role_of(teacher) == Role.TEACHER
    assert role_of(student) == Role.STUDENT
    assert role_of(AnonymousUser()) is None
    assert teacher.profile.is_teacher
