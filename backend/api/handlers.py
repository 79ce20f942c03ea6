# api/handlers.py
"""
DRF exception handler that renders every failure in the error envelope.

Configured through ``REST_FRAMEWORK['EXCEPTION_HANDLER']`` so views never
build error responses themselves.
"""

import logging
from typing import Any, List

from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status

from .envelope import error_response
from .exceptions import ServiceError

logger = logging.getLogger(__name__)


def flatten_errors(detail: Any, prefix: str = '') -> List[str]:
    """Turn DRF's nested error structure into ``"field: message"`` strings."""
    if isinstance(detail, dict):
        messages: List[str] = []
        for field, value in detail.items():
            if field == 'non_field_errors':
                key = prefix
            else:
                key = f'{prefix}.{field}' if prefix else str(field)
            messages.extend(flatten_errors(value, key))
        return messages

    if isinstance(detail, (list, tuple)):
        messages = []
        for position, value in enumerate(detail):
            if isinstance(value, (dict, list, tuple)):
                messages.extend(flatten_errors(value, f'{prefix}[{position}]'))
            else:
                messages.extend(flatten_errors(value, prefix))
        return messages

    return [f'{prefix}: {detail}' if prefix else str(detail)]


def envelope_exception_handler(exc, context):
    view = context.get('view')
    view_name = type(view).__name__ if view is not None else 'unknown view'

    if isinstance(exc, ServiceError):
        log = logger.warning if exc.status_code < 500 else logger.error
        log(f"{view_name}: {exc.kind}: {exc.message}")
        return error_response(exc.status_code, exc.message, exc.details)

    if isinstance(exc, drf_exceptions.ValidationError):
        messages = flatten_errors(exc.detail)
        summary = f'Validation Error: {messages[0]}' if messages else 'Validation Error'
        logger.info(f"{view_name}: request rejected: {messages}")
        return error_response(status.HTTP_400_BAD_REQUEST, summary, messages)

    if isinstance(exc, drf_exceptions.ParseError):
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            'Malformed JSON request body',
            str(exc.detail),
        )

    if isinstance(exc, (Http404, drf_exceptions.NotFound)):
        return error_response(status.HTTP_404_NOT_FOUND, 'Resource not found')

    if isinstance(exc, drf_exceptions.APIException):
        return error_response(exc.status_code, str(exc.detail))

    logger.exception(f"{view_name}: unhandled error: {exc}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        'Internal server error',
        str(exc),
    )
