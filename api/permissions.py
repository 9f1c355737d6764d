"""Custom permissions for REST API v1."""
from __future__ import annotations

from rest_framework.permissions import BasePermission, SAFE_METHODS

from accounts.models import Role, role_of


class IsAuthenticatedOrReadOnly(BasePermission):
    def has_permission(self, request, view):  # noqa: D401
        return bool(request.method in SAFE_METHODS or (request.user and request.user.is_authenticated))


class IsStudent(BasePermission):
    message = "Only students can do this."

    def has_permission(self, request, view):
        return role_of(request.user) == Role.STUDENT
