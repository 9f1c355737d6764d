from django.apps import AppConfig


class AssessmentsConfig(AppConfig):
    """App configuration for question banks, grading and submissions."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "assessments"
