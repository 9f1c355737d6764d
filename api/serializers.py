"""Serializers for REST API v1.

Keep responses modest and role-aware: the enrolment key is shown to the
course owner only, and students never receive correct answers.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from activity.models import Announcement
from assessments.grading import SubmittedAnswer
from assessments.models import AnswerRecord, Question, Submission
from courses.models import Course, Enrolment, EnrolmentStatus, Group
from materials.models import Material, MaterialType, VideoProgress, WATCHABLE_TYPES

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ("id", "username", "role")

    def get_role(self, obj) -> str | None:
        profile = getattr(obj, "profile", None)
        return getattr(profile, "role", None)


class CourseSerializer(serializers.ModelSerializer):
    owner = UserSerializer(read_only=True)
    enrolment_key = serializers.CharField(max_length=64, required=False)

    class Meta:
        model = Course
        fields = ("id", "title", "description", "owner", "enrolment_key", "created_at", "updated_at")
        read_only_fields = ("owner", "created_at", "updated_at")

    def validate_enrolment_key(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Enrolment key cannot be blank.")
        return value

    def to_representation(self, instance):
        data = super().to_representation(instance)
        request = self.context.get("request")
        if not (request and instance.is_owner(request.user)):
            data.pop("enrolment_key", None)
        return data


class GroupSerializer(serializers.ModelSerializer):
    course = serializers.PrimaryKeyRelatedField(queryset=Course.objects.all())

    class Meta:
        model = Group
        fields = ("id", "course", "name", "created_at")
        read_only_fields = ("created_at",)
        # Uniqueness is checked by courses.enrolments with a readable message
        validators = []


class EnrolmentSerializer(serializers.ModelSerializer):
    course = serializers.PrimaryKeyRelatedField(queryset=Course.objects.all())
    student = UserSerializer(read_only=True)
    enrolment_key = serializers.CharField(write_only=True, required=False, allow_blank=True)
    group = serializers.PrimaryKeyRelatedField(queryset=Group.objects.all(), required=False, allow_null=True)
    status = serializers.ChoiceField(choices=EnrolmentStatus.choices, required=False)

    class Meta:
        model = Enrolment
        fields = (
            "id",
            "course",
            "student",
            "group",
            "status",
            "enrolment_key",
            "blocked_at",
            "reactivated_at",
            "created_at",
        )
        read_only_fields = ("student", "blocked_at", "reactivated_at", "created_at")
        # Duplicate enrolments are reported by courses.enrolments as a 400
        validators = []


class MaterialSerializer(serializers.ModelSerializer):
    file_url = serializers.SerializerMethodField()

    class Meta:
        model = Material
        fields = (
            "id",
            "course",
            "material_type",
            "title",
            "description",
            "order_index",
            "video_url",
            "file",
            "file_url",
            "text_content",
            "size_bytes",
            "mime",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("created_at", "updated_at", "size_bytes", "mime", "file_url")
        extra_kwargs = {"file": {"write_only": True, "required": False}}

    def get_file_url(self, obj) -> str:
        if not obj.file:
            return ""
        request = self.context.get("request")
        return request.build_absolute_uri(obj.file.url) if request else obj.file.url

    def validate(self, attrs):
        def current(name, default=""):
            if name in attrs:
                return attrs[name]
            return getattr(self.instance, name, default) if self.instance else default

        material_type = current("material_type", MaterialType.PDF)
        if material_type in WATCHABLE_TYPES and not current("video_url"):
            raise serializers.ValidationError({"video_url": "A video URL is required for this material type."})
        if material_type == MaterialType.PDF and not current("file", None):
            raise serializers.ValidationError({"file": "A PDF file is required."})
        if self.instance and "course" in attrs and attrs["course"].pk != self.instance.course_id:
            raise serializers.ValidationError({"course": "Materials cannot be moved between courses."})
        return attrs


class ReorderItemSerializer(serializers.Serializer):
    material_id = serializers.IntegerField()
    order_index = serializers.IntegerField()


class ReorderSerializer(serializers.Serializer):
    course = serializers.PrimaryKeyRelatedField(queryset=Course.objects.all())
    updates = ReorderItemSerializer(many=True, allow_empty=False)


class VideoProgressSerializer(serializers.ModelSerializer):
    watch_time = serializers.IntegerField(min_value=0)
    completed = serializers.BooleanField(required=False, default=False)

    class Meta:
        model = VideoProgress
        fields = ("material", "watch_time", "completed", "last_watched_at")
        read_only_fields = ("material", "last_watched_at")


class QuestionSerializer(serializers.ModelSerializer):
    """Output-only; question input is validated by assessments.question_bank."""

    class Meta:
        model = Question
        fields = (
            "id",
            "material",
            "text",
            "kind",
            "options",
            "correct_answer",
            "points",
            "order_index",
            "timestamp_seconds",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if self.context.get("hide_answers"):
            data.pop("correct_answer", None)
        return data


class SubmitAnswersSerializer(serializers.Serializer):
    """Accept answers as a list of `{question_id, answer}` or a `{question_id: answer}` map."""

    answers = serializers.JSONField(required=False, allow_null=True)

    default_error_messages = {
        "shape": "Answers must be a list of {{question_id, answer}} objects or a mapping of question id to answer.",
        "question_id": "Each answer needs an integer question_id.",
    }

    def _question_id(self, value) -> int:
        if isinstance(value, bool):
            self.fail("question_id")
        try:
            return int(value)
        except (TypeError, ValueError):
            self.fail("question_id")

    @staticmethod
    def _answer_text(value) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    def validate_answers(self, value) -> list[SubmittedAnswer]:
        if value is None:
            return []
        if isinstance(value, dict):
            return [SubmittedAnswer(self._question_id(k), self._answer_text(v)) for k, v in value.items()]
        if isinstance(value, list):
            parsed = []
            for item in value:
                if not isinstance(item, dict):
                    self.fail("shape")
                qid = item.get("question_id", item.get("questionId"))
                parsed.append(SubmittedAnswer(self._question_id(qid), self._answer_text(item.get("answer"))))
            return parsed
        self.fail("shape")


class AnswerRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = AnswerRecord
        fields = ("question", "answer", "is_correct", "points_earned")


class SubmissionSerializer(serializers.ModelSerializer):
    answers = AnswerRecordSerializer(many=True, read_only=True)
    percentage = serializers.FloatField(read_only=True)

    class Meta:
        model = Submission
        fields = ("id", "material", "student", "score", "total_points", "percentage", "submitted_at", "answers")
        read_only_fields = fields


class AnnouncementSerializer(serializers.ModelSerializer):
    author = UserSerializer(read_only=True)

    class Meta:
        model = Announcement
        fields = ("id", "course", "author", "title", "message", "created_at")
        read_only_fields = ("course", "author", "created_at")


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_current_password(self, value: str) -> str:
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate_new_password(self, value: str) -> str:
        try:
            validate_password(value, user=self.context["request"].user)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(list(exc.messages))
        return value
