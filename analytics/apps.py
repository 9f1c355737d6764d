from django.apps import AppConfig


class AnalyticsConfig(AppConfig):
    """App configuration for rankings and course analytics (no models)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "analytics"
