from django.apps import AppConfig


class MaterialsConfig(AppConfig):
    """App configuration for course materials and uploads."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "materials"

