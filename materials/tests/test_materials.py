from __future__ import annotations

import pytest
from django.core.exceptions import ValidationError as UploadError

from assessments.exceptions import ValidationError
from materials.models import Material, MaterialType, validate_upload
from materials.utils import record_pdf_download, record_video_progress, reorder_materials


class Dummy:
    def __init__(self, name, size):
        self.name = name
        self.size = size


@pytest.mark.parametrize("name,size", [("x.pdf", 25 * 1024 * 1024 + 1), ("x.exe", 1024), ("x", 10)])
def test_validate_upload_rejects(name, size):
    with pytest.raises(UploadError):
        validate_upload(Dummy(name, size))


def test_validate_upload_accepts_pdf_and_images():
    for name in ("x.pdf", "y.PNG", "z.webp"):
        validate_upload(Dummy(name, 1024))


@pytest.mark.django_db
def test_assessment_flags(mcq, listening, course, teacher):
    notice = Material.objects.create(course=course, uploaded_by=teacher, material_type=MaterialType.NOTICE, title="N")
    assert mcq.is_assessment and listening.is_assessment
    assert not notice.is_assessment


@pytest.mark.django_db
def test_progress_only_for_watchable(mcq, listening, enrolled):
    with pytest.raises(ValidationError):
        record_video_progress(mcq, enrolled, 10)
    p = record_video_progress(listening, enrolled, 10)
    p2 = record_video_progress(listening, enrolled, 20, completed=True)
    assert p.pk == p2.pk
    with pytest.raises(ValidationError):
        record_pdf_download(listening, enrolled)


@pytest.mark.django_db
def test_reorder_requires_all_in_course(course, mcq, listening):
    assert reorder_materials(course, [{"material_id": listening.pk, "order_index": 0}, {"material_id": mcq.pk, "order_index": 1}]) == 2
    assert list(course.materials.values_list("pk", flat=True)) == [listening.pk, mcq.pk]
    with pytest.raises(ValidationError):
        reorder_materials(course, [{"material_id": 999999, "order_index": 0}])
