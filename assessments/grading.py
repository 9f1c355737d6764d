"""Pure grading of submitted answers against a question bank.

Nothing here touches the database: `grade` works on any objects exposing
`id`, `correct_answer` and `points` (normally `Question` instances) and
returns plain dataclasses which `assessments.submissions` persists.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence


class Gradable(Protocol):
    id: int
    correct_answer: str
    points: float


@dataclass(frozen=True)
class SubmittedAnswer:
    question_id: int
    answer: str = ""


@dataclass(frozen=True)
class GradedAnswer:
    question_id: int
    answer: str
    is_correct: bool
    points_earned: float


@dataclass(frozen=True)
class GradeResult:
    answers: tuple[GradedAnswer, ...] = field(default_factory=tuple)
    score: float = 0.0
    total_points: float = 0.0

    @property
    def results(self) -> dict[int, bool]:
        """Per-question correctness keyed by question id."""
        return {a.question_id: a.is_correct for a in self.answers}


def normalise_answer(value: str | None) -> str:
    return (value or "").strip().lower()


def is_correct(answer: str | None, correct_answer: str | None) -> bool:
    """The one correctness rule: trimmed, case-insensitive string equality."""
    return normalise_answer(answer) == normalise_answer(correct_answer)


def grade(questions: Sequence[Gradable], submitted: Iterable[SubmittedAnswer]) -> GradeResult:
    """Grade one set of answers against one question bank.

    - every question counts towards `total_points`, answered or not
    - an unanswered question is graded against the empty string
    - if a question id appears more than once, the first answer wins
    """
    lookup: dict[int, str] = {}
    for sa in submitted:
        lookup.setdefault(sa.question_id, sa.answer)

    graded: list[GradedAnswer] = []
    score = 0.0
    total = 0.0
    for q in questions:
        total += q.points
        answer = lookup.get(q.id) or ""
        ok = is_correct(answer, q.correct_answer)
        earned = q.points if ok else 0.0
        score += earned
        graded.append(GradedAnswer(question_id=q.id, answer=answer, is_correct=ok, points_earned=earned))
    return GradeResult(answers=tuple(graded), score=score, total_points=total)
