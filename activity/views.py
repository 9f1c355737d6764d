from __future__ import annotations

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from .models import Notification

MAX_LIMIT = 100


@login_required
@require_GET
def notifications_recent(request: HttpRequest) -> JsonResponse:
    """Return recent notifications and unread count for the current user."""
    default = getattr(settings, "NOTIFICATIONS_RECENT_LIMIT", 10)
    try:
        limit = int(request.GET.get("limit", default))
    except (TypeError, ValueError):
        limit = default
    limit = max(1, min(limit, MAX_LIMIT))
    qs = Notification.objects.filter(user=request.user).order_by("-created_at", "-id")
    unread = qs.filter(read=False).count()
    data = [
        {
            "id": n.id,
            "type": n.type,
            "course": n.course_id,
            "message": n.message,
            "created_at": n.created_at.isoformat(),
            "read": n.read,
        }
        for n in qs[:limit]
    ]
    return JsonResponse({"unread": unread, "results": data})


@login_required
@require_POST
def notifications_mark_all_read(request: HttpRequest) -> JsonResponse:
    updated = Notification.objects.filter(user=request.user, read=False).update(read=True)
    return JsonResponse({"updated": updated, "unread": 0})
