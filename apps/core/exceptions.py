"""
Typed API errors shared by the catalog and user endpoints, plus the DRF
exception handler that adds a machine-readable ``code`` to error bodies.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    """Raised when a write would duplicate a unique value."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "A record with this value already exists."
    default_code = "conflict"


class ForeignKeyViolation(APIException):
    """Raised when a record cannot be removed because others still reference it."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "This record is still referenced by other records."
    default_code = "foreign_key_violation"


def api_exception_handler(exc, context):
    """
    Wrap DRF's default handler so that single-message errors carry their code.

    ``{"detail": "Not found."}`` becomes ``{"detail": "Not found.", "code": "not_found"}``.
    Field validation errors are returned unchanged.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(response.data, dict) and set(response.data) == {"detail"}:
        code = getattr(response.data["detail"], "code", None)
        if code:
            response.data["code"] = code

    if response.status_code >= 500:
        logger.error(f"API error in {context.get('view').__class__.__name__}: {exc}")

    return response
