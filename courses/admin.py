from django.contrib import admin

from .models import Course, Enrolment, Group


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "created_at")
    search_fields = ("title", "description", "owner__username")


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ("name", "course", "created_at")
    search_fields = ("name", "course__title")


@admin.register(Enrolment)
class EnrolmentAdmin(admin.ModelAdmin):
    list_display = ("course", "student", "group", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("course__title", "student__username")
