from __future__ import annotations

from unittest import mock

import pytest
from django.db import DatabaseError

from accounts.models import Role
from assessments.exceptions import AuthorizationError, NotFoundError, PersistenceError, ValidationError
from assessments.grading import SubmittedAnswer
from assessments.models import AnswerRecord, Submission
from assessments.question_bank import create_question
from assessments.submissions import latest_submission, submit_assessment
from courses.models import Enrolment, EnrolmentStatus


@pytest.fixture
def bank(mcq):
    q1 = create_question(mcq, {"text": "Pet?", "options": ["Cat", "Dog"], "correct_answer": "Cat", "order_index": 1})
    q2 = create_question(
        mcq, {"text": "Sky?", "options": ["Red", "Blue", "Green"], "correct_answer": "Blue", "points": 2, "order_index": 2}
    )
    return q1, q2


@pytest.mark.django_db
def test_submit_grades_and_stores_answers(mcq, enrolled, bank):
    q1, q2 = bank
    outcome = submit_assessment(mcq, enrolled, [SubmittedAnswer(q1.pk, "cat"), SubmittedAnswer(q2.pk, "Green")])
    sub = outcome.submission
    assert (sub.score, sub.total_points) == (1.0, 3.0)
    records = list(AnswerRecord.objects.filter(submission=sub).order_by("question__order_index"))
    assert [(r.question_id, r.is_correct, r.points_earned) for r in records] == [(q1.pk, True, 1.0), (q2.pk, False, 0.0)]
    assert outcome.result.results == {q1.pk: True, q2.pk: False}


@pytest.mark.django_db
def test_every_submit_creates_a_new_attempt(mcq, enrolled, bank):
    q1, _ = bank
    submit_assessment(mcq, enrolled, [SubmittedAnswer(q1.pk, "Dog")])
    second = submit_assessment(mcq, enrolled, [SubmittedAnswer(q1.pk, "Cat")]).submission
    assert Submission.objects.filter(material=mcq, student=enrolled).count() == 2
    assert latest_submission(mcq, enrolled).pk == second.pk


@pytest.mark.django_db
def test_empty_answers_rejected(mcq, enrolled, bank):
    with pytest.raises(ValidationError) as exc:
        submit_assessment(mcq, enrolled, [])
    assert exc.value.message == "Answers are required"
    assert not Submission.objects.exists()


@pytest.mark.django_db
def test_blocked_student_cannot_submit(mcq, course, enrolled, teacher, bank):
    Enrolment.objects.get(course=course, student=enrolled).set_status(EnrolmentStatus.BLOCKED, teacher)
    with pytest.raises(AuthorizationError):
        submit_assessment(mcq, enrolled, [SubmittedAnswer(bank[0].pk, "Cat")])


@pytest.mark.django_db
def test_teacher_cannot_submit(mcq, teacher, bank):
    with pytest.raises(AuthorizationError):
        submit_assessment(mcq, teacher, [SubmittedAnswer(bank[0].pk, "Cat")])


@pytest.mark.django_db
def test_unenrolled_student_cannot_submit(mcq, user_factory, bank):
    outsider = user_factory("outsider", Role.STUDENT)
    with pytest.raises(AuthorizationError):
        submit_assessment(mcq, outsider, [SubmittedAnswer(bank[0].pk, "Cat")])


@pytest.mark.django_db
def test_assessment_without_questions_is_not_found(mcq, enrolled):
    with pytest.raises(NotFoundError):
        submit_assessment(mcq, enrolled, [SubmittedAnswer(1, "Cat")])


@pytest.mark.django_db
def test_failed_answer_write_rolls_back_submission(mcq, enrolled, bank):
    with mock.patch.object(AnswerRecord.objects, "bulk_create", side_effect=DatabaseError("disk full")):
        with pytest.raises(PersistenceError):
            submit_assessment(mcq, enrolled, [SubmittedAnswer(bank[0].pk, "Cat")])
    assert not Submission.objects.exists()
    assert not AnswerRecord.objects.exists()


@pytest.mark.django_db
def test_deleting_a_question_keeps_answer_records(mcq, enrolled, bank):
    q1, q2 = bank
    sub = submit_assessment(mcq, enrolled, [SubmittedAnswer(q1.pk, "Cat")]).submission
    q2.delete()
    assert sub.answers.count() == 2
    assert sub.answers.filter(question__isnull=True).count() == 1


@pytest.mark.django_db
def test_latest_submission_none_without_attempts(mcq, enrolled):
    assert latest_submission(mcq, enrolled) is None
