from __future__ import annotations

import logging
from typing import Iterable

from django.db import transaction

from assessments.exceptions import ValidationError
from courses.models import Course
from .models import Material, MaterialType, PdfDownload, VideoProgress, WATCHABLE_TYPES

logger = logging.getLogger(__name__)


@transaction.atomic
def reorder_materials(course: Course, updates: Iterable[dict]) -> int:
    """Apply a batch of `{material_id, order_index}` updates to a course.

    Every referenced material must belong to `course`; otherwise nothing is
    changed. Returns the number of materials updated.
    """
    updates = list(updates)
    wanted = {int(u["material_id"]): int(u["order_index"]) for u in updates}
    materials = list(Material.objects.select_for_update().filter(course=course, pk__in=wanted.keys()))
    if len(materials) != len(wanted):
        raise ValidationError("All materials must belong to this course.")
    for m in materials:
        m.order_index = wanted[m.pk]
    Material.objects.bulk_update(materials, ["order_index"])
    logger.info("Reordered %d materials in course %s", len(materials), course.pk)
    return len(materials)


def record_video_progress(material: Material, student, watch_time: int, completed: bool = False) -> VideoProgress:
    """Upsert the student's watch progress for a video material."""
    if material.material_type not in WATCHABLE_TYPES:
        raise ValidationError("Progress can only be recorded for videos.")
    progress, _ = VideoProgress.objects.update_or_create(
        material=material,
        student=student,
        defaults={"watch_time": watch_time, "completed": completed},
    )
    return progress


def record_pdf_download(material: Material, student) -> PdfDownload:
    if material.material_type != MaterialType.PDF:
        raise ValidationError("Downloads can only be recorded for PDFs.")
    return PdfDownload.objects.create(material=material, student=student)
