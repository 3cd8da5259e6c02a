"""DRF integration for the reservation error taxonomy."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    InvalidTransition,
    NotFound,
    Overlap,
    ReservationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Overlap, status.HTTP_409_CONFLICT),
    (InvalidTransition, status.HTTP_409_CONFLICT),
)


def status_for(exc: ReservationError) -> int:
    for error_class, http_status in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def exception_handler(exc, context):  # type: ignore
    """Render ReservationError as ``{"error": {"code", "message"}}``."""

    if isinstance(exc, ReservationError):
        view = context.get("view")
        logger.info(
            "Reservation rule violated in %s: %s",
            view.__class__.__name__ if view else "unknown view",
            exc.code,
        )
        return Response({"error": exc.to_dict()}, status=status_for(exc))
    return drf_exception_handler(exc, context)
