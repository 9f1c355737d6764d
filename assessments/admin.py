from django.contrib import admin

from .models import AnswerRecord, Question, Submission


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("material", "order_index", "kind", "text", "points")
    list_filter = ("kind",)
    search_fields = ("text", "material__title")


class AnswerRecordInline(admin.TabularInline):
    model = AnswerRecord
    extra = 0
    can_delete = False
    readonly_fields = ("question", "answer", "is_correct", "points_earned")


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ("material", "student", "score", "total_points", "submitted_at")
    list_filter = ("material__course",)
    search_fields = ("student__username", "material__title")
    inlines = [AnswerRecordInline]
