"""Map domain errors to HTTP responses for DRF views."""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from assessments.exceptions import (
    AuthorizationError,
    ClasswiseError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (PersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def exception_handler(exc, context):
    """Return `{"detail": message}` for domain errors; defer to DRF otherwise."""
    if isinstance(exc, ClasswiseError):
        code = status.HTTP_400_BAD_REQUEST
        for cls, mapped in STATUS_BY_ERROR:
            if isinstance(exc, cls):
                code = mapped
                break
        if code >= 500:
            view = context.get("view")
            logger.error("%s failed: %s", type(view).__name__ if view else "request", exc.message)
        return Response({"detail": exc.message}, status=code)
    return drf_exception_handler(exc, context)
