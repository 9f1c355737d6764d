"""REST API v1 viewsets and endpoints."""
from __future__ import annotations

import logging
from dataclasses import asdict

from django.contrib.auth import update_session_auth_hash
from django.db.models import Q
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import Role, role_of
from analytics.aggregator import course_analytics, scoped_rankings, student_summary
from assessments.exceptions import AuthorizationError, NotFoundError, ValidationError
from assessments.models import Question
from assessments.question_bank import (
    create_question,
    create_questions,
    delete_question,
    ensure_assessment,
    update_question,
)
from assessments.submissions import latest_submission, submit_assessment
from courses.enrolments import create_group, enrol_student, remove_enrolment, rename_group, update_enrolment
from courses.models import Course, Enrolment, EnrolmentStatus, Group
from materials.models import Material
from materials.utils import record_pdf_download, record_video_progress, reorder_materials
from .permissions import IsAuthenticatedOrReadOnly, IsStudent
from .serializers import (
    AnnouncementSerializer,
    ChangePasswordSerializer,
    CourseSerializer,
    EnrolmentSerializer,
    GroupSerializer,
    MaterialSerializer,
    QuestionSerializer,
    ReorderSerializer,
    SubmissionSerializer,
    SubmitAnswersSerializer,
    VideoProgressSerializer,
)

logger = logging.getLogger(__name__)


def _require_owner(user, course: Course, message: str = "Only the course owner can do this.") -> None:
    if not course.is_owner(user):
        raise AuthorizationError(message)


def _require_access(user, course: Course) -> None:
    if not course.can_view(user):
        raise AuthorizationError("Enrol to access this course.")


def _require_active_student(user, course: Course) -> None:
    if role_of(user) != Role.STUDENT or not course.has_active_enrolment(user):
        raise AuthorizationError("Only enrolled students can do this.")


def _json_object(data) -> dict:
    if hasattr(data, "dict"):
        data = data.dict()
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object.")
    return data


class CourseViewSet(viewsets.ModelViewSet):
    queryset = Course.objects.select_related("owner__profile").all()
    serializer_class = CourseSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    search_fields = ["title", "description", "owner__username"]
    ordering_fields = ["created_at", "updated_at", "title"]

    def perform_create(self, serializer):
        # Only teachers can create courses; owner is current user
        if role_of(self.request.user) != Role.TEACHER:
            raise AuthorizationError("Only teachers can create courses.")
        course = serializer.save(owner=self.request.user)
        logger.info("Course %s created by user %s", course.pk, self.request.user.pk)

    def retrieve(self, request, *args, **kwargs):
        _require_access(request.user, self.get_object())
        return super().retrieve(request, *args, **kwargs)

    def perform_update(self, serializer):
        _require_owner(self.request.user, serializer.instance)
        serializer.save()

    def perform_destroy(self, instance):
        _require_owner(self.request.user, instance)
        logger.info("Course %s deleted by user %s", instance.pk, self.request.user.pk)
        instance.delete()

    @action(detail=True, methods=["get"])
    def analytics(self, request, pk=None):
        course = self.get_object()
        _require_owner(request.user, course)
        return Response(course_analytics(course))

    @action(detail=True, methods=["get"])
    def rankings(self, request, pk=None):
        course = self.get_object()
        _require_access(request.user, course)
        group = None
        raw = request.query_params.get("group")
        if raw:
            try:
                group_id = int(raw)
            except ValueError:
                raise ValidationError("Invalid group id")
            group = Group.objects.filter(pk=group_id).first()
            if group is None:
                raise NotFoundError("Group not found")
        student_count, entries = scoped_rankings(course, group)
        return Response(
            {
                "course": course.pk,
                "group": group.pk if group else None,
                "student_count": student_count,
                "rankings": [asdict(e) for e in entries],
            }
        )

    @action(detail=True, methods=["get", "post"], serializer_class=AnnouncementSerializer)
    def announcements(self, request, pk=None):
        course = self.get_object()
        if request.method == "POST":
            _require_owner(request.user, course, "Only the course owner can post announcements.")
            serializer = self.get_serializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            serializer.save(course=course, author=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        _require_access(request.user, course)
        page = self.paginate_queryset(course.announcements.select_related("author__profile"))
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)


class GroupViewSet(viewsets.ModelViewSet):
    serializer_class = GroupSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["course"]
    ordering_fields = ["name", "created_at"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        if not self.request.user.is_authenticated:
            return Group.objects.none()
        # Groups are visible to the owning teacher only
        return Group.objects.select_related("course").filter(course__owner=self.request.user).order_by("course_id", "name")

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        group = create_group(serializer.validated_data["course"], request.user, serializer.validated_data["name"])
        return Response(self.get_serializer(group).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        group = self.get_object()
        serializer = self.get_serializer(group, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        course = serializer.validated_data.get("course")
        if course is not None and course.pk != group.course_id:
            raise ValidationError("Groups cannot be moved between courses.")
        if "name" in serializer.validated_data:
            rename_group(group, request.user, serializer.validated_data["name"])
        return Response(self.get_serializer(group).data)

    def perform_destroy(self, instance):
        _require_owner(self.request.user, instance.course)
        instance.delete()


class EnrolmentViewSet(viewsets.ModelViewSet):
    serializer_class = EnrolmentSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["course", "status", "group"]
    ordering_fields = ["created_at", "status"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        # Students: own enrolments; Teachers: enrolments to their courses
        user = self.request.user
        base = Enrolment.objects.select_related("course", "student__profile", "group")
        role = role_of(user)
        if role == Role.STUDENT:
            return base.filter(student=user)
        if role == Role.TEACHER:
            return base.filter(course__owner=user)
        return Enrolment.objects.none()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        enrolment = enrol_student(
            serializer.validated_data["course"], request.user, serializer.validated_data.get("enrolment_key")
        )
        return Response(self.get_serializer(enrolment).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        enrolment = self.get_object()
        serializer = self.get_serializer(enrolment, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        course = data.get("course")
        if course is not None and course.pk != enrolment.course_id:
            raise ValidationError("Enrolments cannot be moved between courses.")
        changes = {}
        if "status" in data:
            changes["status"] = data["status"]
        if "group" in data:
            changes["group"] = data["group"]
        update_enrolment(enrolment, request.user, **changes)
        return Response(self.get_serializer(enrolment).data)

    def destroy(self, request, *args, **kwargs):
        # Student can unenrol self; teacher owner can remove any from own course
        remove_enrolment(self.get_object(), request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MaterialViewSet(viewsets.ModelViewSet):
    serializer_class = MaterialSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["course", "material_type"]
    search_fields = ["title", "description"]
    ordering_fields = ["order_index", "created_at", "title"]

    def get_queryset(self):
        # Owners see their course materials; students see where actively enrolled
        user = self.request.user
        if not user.is_authenticated:
            return Material.objects.none()
        visible = Q(course__owner=user) | Q(course__enrolments__student=user, course__enrolments__status=EnrolmentStatus.ACTIVE)
        return Material.objects.select_related("course").filter(visible).distinct()

    def perform_create(self, serializer):
        _require_owner(self.request.user, serializer.validated_data["course"], "Only the course owner can add materials.")
        material = serializer.save(uploaded_by=self.request.user)
        logger.info("Material %s (%s) added to course %s", material.pk, material.material_type, material.course_id)

    def perform_update(self, serializer):
        _require_owner(self.request.user, serializer.instance.course, "Only the course owner can edit materials.")
        serializer.save()

    def perform_destroy(self, instance):
        _require_owner(self.request.user, instance.course, "Only the course owner can delete materials.")
        instance.delete()

    @action(detail=False, methods=["post"], serializer_class=ReorderSerializer)
    def reorder(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        course = serializer.validated_data["course"]
        _require_owner(request.user, course, "Only the course owner can reorder materials.")
        updated = reorder_materials(course, serializer.validated_data["updates"])
        return Response({"updated": updated})

    @action(detail=True, methods=["post"], serializer_class=VideoProgressSerializer)
    def progress(self, request, pk=None):
        material = self.get_object()
        _require_active_student(request.user, material.course)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        progress = record_video_progress(
            material,
            request.user,
            serializer.validated_data["watch_time"],
            serializer.validated_data.get("completed", False),
        )
        return Response(self.get_serializer(progress).data)

    @action(detail=True, methods=["post"])
    def download(self, request, pk=None):
        material = self.get_object()
        _require_active_student(request.user, material.course)
        record_pdf_download(material, request.user)
        return Response({"file_url": self.get_serializer(material).data["file_url"]}, status=status.HTTP_201_CREATED)


def _assessment(material_id: int) -> Material:
    material = Material.objects.select_related("course").filter(pk=material_id).first()
    if material is None:
        raise NotFoundError("Assessment not found")
    ensure_assessment(material)
    return material


def _question(material: Material, question_id: int) -> Question:
    question = Question.objects.select_related("material__course").filter(material=material, pk=question_id).first()
    if question is None:
        raise NotFoundError("Question not found")
    return question


class QuestionListView(APIView):
    """List an assessment's questions, or add one (owner only)."""

    permission_classes = [IsAuthenticated]
    serializer_class = QuestionSerializer

    def get(self, request, material_id: int):
        material = _assessment(material_id)
        is_owner = material.course.is_owner(request.user)
        if not is_owner:
            _require_active_student(request.user, material.course)
        questions = Question.objects.filter(material=material).order_by("order_index", "id")
        data = QuestionSerializer(questions, many=True, context={"request": request, "hide_answers": not is_owner}).data
        return Response({"count": len(data), "results": data})

    def post(self, request, material_id: int):
        material = _assessment(material_id)
        _require_owner(request.user, material.course, "Only the course owner can manage questions.")
        question = create_question(material, _json_object(request.data))
        return Response(QuestionSerializer(question).data, status=status.HTTP_201_CREATED)


class QuestionBatchView(APIView):
    """Create several questions at once; nothing is saved if any is invalid."""

    permission_classes = [IsAuthenticated]
    serializer_class = QuestionSerializer

    def post(self, request, material_id: int):
        material = _assessment(material_id)
        _require_owner(request.user, material.course, "Only the course owner can manage questions.")
        items = request.data.get("questions") if isinstance(request.data, dict) else request.data
        if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
            raise ValidationError("Questions must be a list of objects.")
        created = create_questions(material, items)
        return Response(
            {"count": len(created), "results": QuestionSerializer(created, many=True).data},
            status=status.HTTP_201_CREATED,
        )


class QuestionDetailView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = QuestionSerializer

    def patch(self, request, material_id: int, question_id: int):
        material = _assessment(material_id)
        _require_owner(request.user, material.course, "Only the course owner can manage questions.")
        question = update_question(_question(material, question_id), _json_object(request.data))
        return Response(QuestionSerializer(question).data)

    def delete(self, request, material_id: int, question_id: int):
        material = _assessment(material_id)
        _require_owner(request.user, material.course, "Only the course owner can manage questions.")
        delete_question(_question(material, question_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class SubmitView(APIView):
    """Grade and store one attempt; responds with the per-question results."""

    permission_classes = [IsAuthenticated]
    serializer_class = SubmitAnswersSerializer

    def post(self, request, material_id: int):
        material = _assessment(material_id)
        serializer = SubmitAnswersSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = submit_assessment(material, request.user, serializer.validated_data.get("answers") or [])
        result = outcome.result
        return Response(
            {
                "submissionId": outcome.submission.pk,
                "score": result.score,
                "totalPoints": result.total_points,
                "results": {str(qid): ok for qid, ok in result.results.items()},
            },
            status=status.HTTP_201_CREATED,
        )


class LatestSubmissionView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SubmissionSerializer

    def get(self, request, material_id: int):
        material = _assessment(material_id)
        _require_active_student(request.user, material.course)
        submission = latest_submission(material, request.user)
        if submission is None:
            raise NotFoundError("No submissions yet")
        return Response(SubmissionSerializer(submission).data)


class MeSummaryView(APIView):
    """Test performance and learning time of the current student."""

    permission_classes = [IsStudent]

    def get(self, request):
        return Response(student_summary(request.user))


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ChangePasswordSerializer

    def post(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = request.user
        user.set_password(serializer.validated_data["new_password"])
        user.save(update_fields=["password"])
        # Keep the current session valid after the hash changes
        update_session_auth_hash(request, user)
        logger.info("User %s changed their password", user.pk)
        return Response({"detail": "Password updated."})
