# api/exceptions.py
"""
Service Error Taxonomy
======================

Every failure that leaves the backend is one of the kinds below. Core
modules (query engine, prompt builder, response parser, orchestrator)
raise these directly; ``api.handlers.envelope_exception_handler`` turns
them into the error envelope with the matching HTTP status.

    ValidationError      400  malformed or missing input, invalid enum value
    NotFound             404  referenced task does not exist
    UpstreamAuthError    401  provider rejected the credential
    UpstreamQuotaError   429  provider reports quota or rate exhaustion
    ConfigurationError   500  AI credential not configured
    UpstreamParseError   500  provider output failed validation
    InternalError        500  anything else

``details`` carries internal text (provider messages, field errors) and
is only rendered outside production.
"""

from __future__ import annotations

from typing import Any, Optional


class ServiceError(Exception):
    """Base class for all taxonomy errors."""

    status_code: int = 500
    kind: str = "InternalError"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    kind = "ValidationError"
    default_message = "Validation Error"


class NotFound(ServiceError):
    status_code = 404
    kind = "NotFound"
    default_message = "Task not found"


class ConfigurationError(ServiceError):
    status_code = 500
    kind = "ConfigurationError"
    default_message = "OpenAI API key not configured"


class UpstreamAuthError(ServiceError):
    status_code = 401
    kind = "UpstreamAuthError"
    default_message = "Invalid OpenAI API key"


class UpstreamQuotaError(ServiceError):
    status_code = 429
    kind = "UpstreamQuotaError"
    default_message = "OpenAI API quota exceeded"


class UpstreamParseError(ServiceError):
    status_code = 500
    kind = "UpstreamParseError"
    default_message = "Failed to parse AI response"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Any = None,
        index: Optional[int] = None,
    ) -> None:
        # Position of the offending element in a generated batch, if any
        self.index = index
        super().__init__(message, details)


class InternalError(ServiceError):
    status_code = 500
    kind = "InternalError"
    default_message = "Internal server error"
