"""DRF exception handler rendering engine errors as typed responses."""

from __future__ import annotations

import logging

from django.db import DatabaseError  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import EngineError

logger = logging.getLogger(__name__)


def engine_exception_handler(exc, context):  # type: ignore
    """Map EngineError subclasses to ``{"error", "code", "message"}`` bodies."""

    if isinstance(exc, EngineError):
        view = context.get("view")
        view_name = view.__class__.__name__ if view is not None else "unknown"
        if exc.status_code >= 500:
            logger.error(f"{view_name}: {exc.kind} {exc.code}: {exc.message}")
        else:
            logger.warning(f"{view_name}: {exc.kind} {exc.code}: {exc.message}")
        return Response(exc.to_dict(), status=exc.status_code)

    if isinstance(exc, DatabaseError):
        logger.error(f"Unexpected store failure: {exc}", exc_info=True)
        return Response(
            {"error": "internal_error", "code": "internal_error", "message": "Something went wrong."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return drf_exception_handler(exc, context)
