"""Aggregation over stored submissions: rankings and course analytics.

`rank_students` is pure and works on plain `ScoreRecord` values; the
other functions gather records from the database and delegate to it.

Ranking rules:
- a student's average is the mean of their per-submission percentages
  (every attempt counts; a submission worth 0 points counts as 0%)
- students are sorted by average, highest first, with a stable sort so
  equal averages keep the order in which the students first appear
- ranks are positional (1, 2, 3...), equal averages still get distinct ranks
- students with no submissions in scope are not ranked at all
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from django.db.models import Count, Q, Sum

from activity.models import Announcement
from assessments.exceptions import NotFoundError
from assessments.models import Submission
from courses.models import Course, EnrolmentStatus, Group
from materials.models import ASSESSMENT_TYPES, WATCHABLE_TYPES, MaterialType, PdfDownload, VideoProgress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreRecord:
    student_id: int
    score: float
    total_points: float
    username: str = ""


@dataclass(frozen=True)
class RankingEntry:
    student_id: int
    username: str
    average_score: float
    test_count: int
    rank: int


def percentage(score: float, total_points: float) -> float:
    if not total_points:
        return 0.0
    return score * 100.0 / total_points


def rank_students(records: Iterable[ScoreRecord]) -> list[RankingEntry]:
    totals: dict[int, list] = {}
    for r in records:
        slot = totals.setdefault(r.student_id, [0.0, 0, r.username])
        slot[0] += percentage(r.score, r.total_points)
        slot[1] += 1

    averaged = [(sid, total / count, count, username) for sid, (total, count, username) in totals.items()]
    averaged.sort(key=lambda row: row[1], reverse=True)
    return [
        RankingEntry(student_id=sid, username=username, average_score=avg, test_count=count, rank=i)
        for i, (sid, avg, count, username) in enumerate(averaged, start=1)
    ]


def _course_submissions(course: Course):
    return Submission.objects.filter(material__course=course, material__material_type__in=ASSESSMENT_TYPES)


def scoped_rankings(course: Course, group: Group | None = None) -> tuple[int, list[RankingEntry]]:
    """Rank the active students of `course` (or of one of its groups).

    Returns `(student_count, entries)` where `student_count` is the size of
    the scope, ranked or not.
    """
    if group is not None and group.course_id != course.id:
        raise NotFoundError("Group not found")
    student_ids = course.active_student_ids(group=group)
    rows = (
        _course_submissions(course)
        .filter(student_id__in=student_ids)
        .order_by("submitted_at", "id")
        .values_list("student_id", "student__username", "score", "total_points")
    )
    records = [ScoreRecord(student_id=sid, username=uname, score=score, total_points=total) for sid, uname, score, total in rows]
    entries = rank_students(records)
    logger.debug("Ranked %d of %d students in course %s (group %s)", len(entries), len(student_ids), course.pk, getattr(group, "pk", None))
    return len(student_ids), entries


def _mean_percentage(rows) -> float | None:
    values = [percentage(score, total) for score, total in rows]
    if not values:
        return None
    return sum(values) / len(values)


def course_analytics(course: Course) -> dict:
    """Counts and averages describing one course for its teacher."""
    enrolments = course.enrolments.aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(status=EnrolmentStatus.ACTIVE)),
        blocked=Count("id", filter=Q(status=EnrolmentStatus.BLOCKED)),
        restricted=Count("id", filter=Q(status=EnrolmentStatus.RESTRICTED)),
    )
    materials = course.materials.aggregate(
        tests=Count("id", filter=Q(material_type__in=ASSESSMENT_TYPES)),
        videos=Count("id", filter=Q(material_type=MaterialType.VIDEO)),
        pdfs=Count("id", filter=Q(material_type=MaterialType.PDF)),
    )
    watch = VideoProgress.objects.filter(material__course=course, material__material_type__in=WATCHABLE_TYPES).aggregate(
        total_watch_time=Sum("watch_time"),
        completed=Count("id", filter=Q(completed=True)),
    )
    downloads = PdfDownload.objects.filter(material__course=course, material__material_type=MaterialType.PDF)
    return {
        "total_students": enrolments["total"],
        "active_students": enrolments["active"],
        "blocked_students": enrolments["blocked"],
        "restricted_students": enrolments["restricted"],
        "total_tests": materials["tests"],
        "average_test_score": _mean_percentage(_course_submissions(course).values_list("score", "total_points")),
        "total_videos": materials["videos"],
        "total_pdfs": materials["pdfs"],
        "total_announcements": Announcement.objects.filter(course=course).count(),
        "video_watch_stats": {
            "total_watch_time": watch["total_watch_time"] or 0,
            "completed_videos": watch["completed"],
            "total_videos": materials["videos"],
        },
        "pdf_download_stats": {
            "total_downloads": downloads.count(),
            "unique_downloaders": downloads.order_by().values("student_id").distinct().count(),
        },
    }


def learning_time(total_seconds: int) -> dict:
    hours, rest = divmod(int(total_seconds), 3600)
    minutes = rest // 60
    return {
        "total_seconds": int(total_seconds),
        "hours": hours,
        "minutes": minutes,
        "formatted": f"{hours}h {minutes}m",
    }


def student_summary(student) -> dict:
    """Test performance and learning time for one student across all courses."""
    rows = list(Submission.objects.filter(student=student).values_list("score", "total_points"))
    watched = VideoProgress.objects.filter(student=student).aggregate(total=Sum("watch_time"))["total"] or 0
    return {
        "submission_count": len(rows),
        "average_score": _mean_percentage(rows),
        "enrolled_courses": student.enrolments.filter(status=EnrolmentStatus.ACTIVE).count(),
        "learning_time": learning_time(watched),
    }
