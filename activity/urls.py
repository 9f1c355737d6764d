from django.urls import path

from .views import notifications_mark_all_read, notifications_recent

app_name = "activity"

urlpatterns = [
    path("notifications/recent/", notifications_recent, name="notifications-recent"),
    path("notifications/mark-all-read/", notifications_mark_all_read, name="notifications-mark-all-read"),
]
