"""Question bank management for MCQ and listening tests.

Questions are validated when a teacher creates or edits them, never at
grading time. Loading a bank for grading refuses empty banks.
"""
from __future__ import annotations

import logging
from numbers import Real
from typing import Any, Iterable

from django.db import transaction

from materials.models import Material, MaterialType
from .exceptions import NotFoundError, ValidationError
from .models import Question, QuestionKind

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("text", "kind", "options", "correct_answer", "points", "order_index", "timestamp_seconds")

ALLOWED_KINDS = {
    MaterialType.MCQ_TEST.value: (QuestionKind.MULTIPLE_CHOICE,),
    MaterialType.LISTENING_TEST.value: (
        QuestionKind.MULTIPLE_CHOICE,
        QuestionKind.FILL_BLANK,
        QuestionKind.SHORT_ANSWER,
    ),
}


def ensure_assessment(material: Material) -> None:
    if not material.is_assessment:
        raise NotFoundError("Assessment not found")


def load_question_bank(material: Material) -> list[Question]:
    """Return the assessment's questions in presentation order.

    Raises NotFoundError when the assessment has no questions, since such
    a test cannot be graded.
    """
    ensure_assessment(material)
    questions = list(Question.objects.filter(material=material).order_by("order_index", "id"))
    if not questions:
        raise NotFoundError("No questions found for this test")
    return questions


def _valid_options(options: Any) -> list[str]:
    if options in (None, ""):
        return []
    if not isinstance(options, (list, tuple)):
        raise ValidationError("Options must be a list of strings.")
    cleaned = []
    for opt in options:
        if opt is None:
            continue
        if not isinstance(opt, str):
            raise ValidationError("Options must be a list of strings.")
        opt = opt.strip()
        if not opt:
            continue
        if opt in cleaned:
            raise ValidationError(f"Duplicate option '{opt}'.")
        cleaned.append(opt)
    return cleaned


def clean_question_data(material: Material, data: dict[str, Any]) -> dict[str, Any]:
    """Validate one question's fields for `material` and return them cleaned.

    Multiple-choice questions need at least two non-empty options and a
    correct answer matching one of them (both compared after trimming).
    Other kinds carry no options.
    """
    ensure_assessment(material)
    allowed = ALLOWED_KINDS[material.material_type]

    text = (data.get("text") or "").strip()
    if not text:
        raise ValidationError("Question text is required.")

    kind = data.get("kind") or allowed[0]
    if kind not in allowed:
        raise ValidationError(f"Question type '{kind}' is not allowed for this assessment.")

    correct = data.get("correct_answer")
    if not isinstance(correct, str) or not correct.strip():
        raise ValidationError("Correct answer is required.")
    correct = correct.strip()

    points = data.get("points")
    if points is None:
        points = 1.0
    if isinstance(points, bool) or not isinstance(points, Real) or points <= 0:
        raise ValidationError("Points must be greater than zero.")

    if kind == QuestionKind.MULTIPLE_CHOICE:
        options = _valid_options(data.get("options"))
        if len(options) < 2:
            raise ValidationError("At least 2 valid (non-empty) options are required.")
        if correct not in options:
            raise ValidationError("Correct answer must be one of the valid options.")
    else:
        options = []

    timestamp = data.get("timestamp_seconds")
    if timestamp is not None and (isinstance(timestamp, bool) or not isinstance(timestamp, int) or timestamp < 0):
        raise ValidationError("Timestamp must be a non-negative number of seconds.")

    order_index = data.get("order_index")
    if order_index is None:
        order_index = 0
    if isinstance(order_index, bool) or not isinstance(order_index, int):
        raise ValidationError("Order index must be an integer.")

    return {
        "text": text,
        "kind": kind,
        "options": options,
        "correct_answer": correct,
        "points": float(points),
        "order_index": order_index,
        "timestamp_seconds": timestamp if material.material_type == MaterialType.LISTENING_TEST else None,
    }


def create_question(material: Material, data: dict[str, Any]) -> Question:
    cleaned = clean_question_data(material, data)
    question = Question.objects.create(material=material, **cleaned)
    logger.info("Question %s created on material %s", question.pk, material.pk)
    return question


@transaction.atomic
def create_questions(material: Material, items: Iterable[dict[str, Any]]) -> list[Question]:
    """Create several questions at once; all are validated before any is saved.

    A missing `order_index` defaults to the item's position in the batch.
    """
    items = list(items)
    if not items:
        raise ValidationError("At least one question is required.")
    cleaned = []
    for i, item in enumerate(items):
        data = dict(item)
        if data.get("order_index") is None:
            data["order_index"] = i
        try:
            cleaned.append(clean_question_data(material, data))
        except ValidationError as exc:
            raise ValidationError(f"Question {i + 1}: {exc.message}") from exc
    created = [Question.objects.create(material=material, **c) for c in cleaned]
    logger.info("Created %d questions on material %s", len(created), material.pk)
    return created


def update_question(question: Question, changes: dict[str, Any]) -> Question:
    """Apply a partial update and re-validate the whole question."""
    merged = {name: getattr(question, name) for name in EDITABLE_FIELDS}
    merged.update({k: v for k, v in changes.items() if k in EDITABLE_FIELDS})
    cleaned = clean_question_data(question.material, merged)
    for name, value in cleaned.items():
        setattr(question, name, value)
    question.save()
    logger.info("Question %s updated", question.pk)
    return question


def delete_question(question: Question) -> None:
    pk = question.pk
    question.delete()
    logger.info("Question %s deleted", pk)
