import logging

import pytest
from django.contrib.auth.models import User

from accounts.models import Role
from courses.models import Course, Enrolment
from materials.models import Material, MaterialType


@pytest.fixture(autouse=True)
def silence_django_request_logger():
    """Reduce noise from expected 4xx in passing tests.

    Many tests intentionally exercise 400/403/404 paths. Django logs these
    at WARNING via 'django.request'. Lower that logger to ERROR during
    tests to avoid clutter.
    """
    logger = logging.getLogger("django.request")
    old = logger.level
    logger.setLevel(logging.ERROR)
    try:
        yield
    finally:
        logger.setLevel(old)


def make_user(username, role=Role.STUDENT, password="pw"):
    u = User.objects.create_user(username=username, password=password)
    if u.profile.role != role:
        u.profile.role = role
        u.profile.save(update_fields=["role"])
    return u


@pytest.fixture
def user_factory(db):
    return make_user


@pytest.fixture
def teacher(db):
    return make_user("teach", Role.TEACHER)


@pytest.fixture
def student(db):
    return make_user("stud", Role.STUDENT)


@pytest.fixture
def course(teacher):
    return Course.objects.create(owner=teacher, title="French 101", description="")


@pytest.fixture
def enrolled(course, student):
    Enrolment.objects.create(course=course, student=student)
    return student


@pytest.fixture
def mcq(course, teacher):
    return Material.objects.create(
        course=course, uploaded_by=teacher, material_type=MaterialType.MCQ_TEST, title="Quiz 1"
    )


@pytest.fixture
def listening(course, teacher):
    return Material.objects.create(
        course=course,
        uploaded_by=teacher,
        material_type=MaterialType.LISTENING_TEST,
        title="Listening 1",
        video_url="https://videos.example.com/l1.mp4",
    )
