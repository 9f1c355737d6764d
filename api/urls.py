"""API routes for Classwise.

Versioned REST endpoints live under /api/v1/; the OpenAPI schema and the
interactive documentation are served alongside.
"""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerSplitView
from rest_framework.routers import DefaultRouter

from .views import (
    ChangePasswordView,
    CourseViewSet,
    EnrolmentViewSet,
    GroupViewSet,
    LatestSubmissionView,
    MaterialViewSet,
    MeSummaryView,
    QuestionBatchView,
    QuestionDetailView,
    QuestionListView,
    SubmitView,
)

router = DefaultRouter()
router.register(r"courses", CourseViewSet, basename="courses")
router.register(r"groups", GroupViewSet, basename="groups")
router.register(r"enrolments", EnrolmentViewSet, basename="enrolments")
router.register(r"materials", MaterialViewSet, basename="materials")

v1 = [
    path("assessments/<int:material_id>/questions/", QuestionListView.as_view(), name="assessment-questions"),
    path("assessments/<int:material_id>/questions/batch/", QuestionBatchView.as_view(), name="assessment-questions-batch"),
    path(
        "assessments/<int:material_id>/questions/<int:question_id>/",
        QuestionDetailView.as_view(),
        name="assessment-question-detail",
    ),
    path("assessments/<int:material_id>/submit/", SubmitView.as_view(), name="assessment-submit"),
    path(
        "assessments/<int:material_id>/submissions/latest/",
        LatestSubmissionView.as_view(),
        name="assessment-latest-submission",
    ),
    path("me/summary/", MeSummaryView.as_view(), name="me-summary"),
    path("profile/change-password/", ChangePasswordView.as_view(), name="change-password"),
    path("", include(router.urls)),
]

urlpatterns = [
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    # Split view serves the UI's init script from a URL so CSP needs no inline scripts
    path("docs/", SpectacularSwaggerSplitView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/v1/", include(v1)),
]
