# api/envelope.py
"""Uniform response wrapper shared by every endpoint."""

from typing import Any, Dict, Optional

from django.conf import settings
from rest_framework import status as http_status
from rest_framework.response import Response


def expose_error_details() -> bool:
    return bool(getattr(settings, 'EXPOSE_ERROR_DETAILS', False))


def success_response(
    data: Any = None,
    message: Optional[str] = None,
    status: int = http_status.HTTP_200_OK,
    **extra: Any,
) -> Response:
    """
    Build ``{success: true, data, message?}``.

    Extra keyword arguments (e.g. ``count`` on list responses) are added
    alongside ``data``.
    """
    body: Dict[str, Any] = {'success': True}
    if message:
        body['message'] = message
    body.update(extra)
    body['data'] = data
    return Response(body, status=status)


def error_body(error: str, details: Any = None) -> Dict[str, Any]:
    """Build ``{success: false, error, details?}``; details are dropped in production."""
    body: Dict[str, Any] = {'success': False, 'error': error}
    if details is not None and expose_error_details():
        body['details'] = details
    return body


def error_response(status: int, error: str, details: Any = None) -> Response:
    return Response(error_body(error, details), status=status)
