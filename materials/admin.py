from django.contrib import admin

from .models import Material, PdfDownload, VideoProgress


@admin.register(Material)
class MaterialAdmin(admin.ModelAdmin):
    list_display = ("title", "course", "material_type", "order_index", "uploaded_by", "created_at")
    list_filter = ("material_type",)
    search_fields = ("title", "course__title", "uploaded_by__username")


@admin.register(VideoProgress)
class VideoProgressAdmin(admin.ModelAdmin):
    list_display = ("material", "student", "watch_time", "completed", "last_watched_at")
    list_filter = ("completed",)


@admin.register(PdfDownload)
class PdfDownloadAdmin(admin.ModelAdmin):
    list_display = ("material", "student", "created_at")
