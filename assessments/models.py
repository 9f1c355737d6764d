from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from materials.models import Material


class QuestionKind(models.TextChoices):
    MULTIPLE_CHOICE = "multiple_choice", "Multiple choice"
    FILL_BLANK = "fill_blank", "Fill in the blank"
    SHORT_ANSWER = "short_answer", "Short answer"


class Question(models.Model):
    """A graded question belonging to one assessment material.

    `correct_answer` is stored as authored; grading compares it
    case-insensitively after trimming.
    """

    material = models.ForeignKey(Material, on_delete=models.CASCADE, related_name="questions")
    text = models.TextField()
    kind = models.CharField(max_length=20, choices=QuestionKind.choices, default=QuestionKind.MULTIPLE_CHOICE)
    options = models.JSONField(default=list, blank=True)
    correct_answer = models.CharField(max_length=500)
    points = models.FloatField(default=1.0)
    order_index = models.IntegerField(default=0)
    # Listening tests: when the question appears during the video
    timestamp_seconds = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order_index", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Q{self.order_index}: {self.text[:40]}"


class Submission(models.Model):
    """One complete graded attempt by one student. Immutable once written."""

    material = models.ForeignKey(Material, on_delete=models.CASCADE, related_name="submissions")
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="submissions")
    score = models.FloatField(default=0.0)
    total_points = models.FloatField(default=0.0)
    submitted_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-submitted_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(score__gte=0) & models.Q(score__lte=models.F("total_points")),
                name="submission_score_within_total",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Submission {self.pk} by {self.student_id} on {self.material_id}: {self.score}/{self.total_points}"

    @property
    def percentage(self) -> float:
        if not self.total_points:
            return 0.0
        return self.score * 100.0 / self.total_points


class AnswerRecord(models.Model):
    """The graded outcome for one question within one submission."""

    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name="answers")
    # Keep the record if the teacher later deletes the question
    question = models.ForeignKey(Question, on_delete=models.SET_NULL, null=True, blank=True, related_name="answer_records")
    answer = models.TextField(blank=True)
    is_correct = models.BooleanField(default=False)
    points_earned = models.FloatField(default=0.0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Answer {self.question_id} ({'correct' if self.is_correct else 'wrong'})"
