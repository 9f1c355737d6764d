"""Submission workflow: authorise, grade, and persist one attempt.

A submission and all of its answer records are written in a single
transaction, so readers never observe a partially stored attempt. Each
call creates a new attempt; there is no de-duplication and no retry.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from django.db import DatabaseError, transaction

from accounts.models import Role, role_of
from materials.models import Material
from .exceptions import AuthorizationError, PersistenceError, ValidationError
from .grading import GradeResult, SubmittedAnswer, grade
from .models import AnswerRecord, Submission
from .question_bank import ensure_assessment, load_question_bank

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionOutcome:
    submission: Submission
    result: GradeResult


def record_submission(material: Material, student, result: GradeResult) -> Submission:
    """Persist a graded attempt atomically.

    Raises PersistenceError (with nothing stored) if any write fails.
    """
    try:
        with transaction.atomic():
            submission = Submission.objects.create(
                material=material,
                student=student,
                score=result.score,
                total_points=result.total_points,
            )
            AnswerRecord.objects.bulk_create(
                [
                    AnswerRecord(
                        submission=submission,
                        question_id=a.question_id,
                        answer=a.answer,
                        is_correct=a.is_correct,
                        points_earned=a.points_earned,
                    )
                    for a in result.answers
                ]
            )
    except DatabaseError as exc:
        logger.error("Failed to store submission for student %s on material %s: %s", student.pk, material.pk, exc)
        raise PersistenceError() from exc
    return submission


def check_can_submit(material: Material, student) -> None:
    if role_of(student) != Role.STUDENT:
        raise AuthorizationError("Only students can submit tests")
    if not material.course.has_active_enrolment(student):
        raise AuthorizationError("Not enrolled in this course")


def submit_assessment(material: Material, student, answers: Sequence[SubmittedAnswer] | None) -> SubmissionOutcome:
    """Grade and store one attempt by `student` on `material`.

    Order of checks: the material must be an assessment, the student must
    hold an active enrolment, the answers must be present, and the
    assessment must have questions.
    """
    ensure_assessment(material)
    check_can_submit(material, student)
    if not answers:
        raise ValidationError("Answers are required")
    questions = load_question_bank(material)
    result = grade(questions, answers)
    submission = record_submission(material, student, result)
    logger.info(
        "Submission %s: student %s scored %s/%s on material %s",
        submission.pk,
        student.pk,
        result.score,
        result.total_points,
        material.pk,
    )
    return SubmissionOutcome(submission=submission, result=result)


def latest_submission(material: Material, student) -> Submission | None:
    """Return the student's most recent attempt on `material`, answers prefetched."""
    return (
        Submission.objects.filter(material=material, student=student)
        .prefetch_related("answers")
        .order_by("-submitted_at", "-id")
        .first()
    )
