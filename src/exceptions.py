"""Custom exception hierarchy for the Hate Speech Analysis Console.

Defines structured application errors for inbound validation and for
failures of the external collaborators, with consistent HTTP status
codes and retry behavior.
"""
from typing import Any, Optional

from fastapi import status

class AppError(Exception):
    """Base class for all application-level exceptions."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "APP_ERROR"
    retryable = False
    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        *,
        hint: Optional[str] = None,
        raw: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.hint = hint
        self.raw = raw

# ---- client input ----
class ValidationError(AppError):
    """Raised when the client submission is missing or malformed."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"

# ---- external collaborators ----
class UpstreamStatusError(AppError):
    """Raised when the classification backend answers with a non-2xx status.

    The backend's own status code is passed through to the caller.
    """
    code = "UPSTREAM_STATUS"

    def __init__(self, message: str, upstream_status: int, body: str):
        super().__init__(message, body)
        self.status_code = upstream_status
        self.retryable = upstream_status >= 500

class ExternalFormatError(AppError):
    """Raised when an external response cannot be parsed at all."""
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "EXTERNAL_FORMAT"

class ExternalValidationError(AppError):
    """Raised when an external response parses but is semantically invalid."""
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "EXTERNAL_VALIDATION"

class TransportError(AppError):
    """Raised for network failures and timeouts of the external calls."""
    code = "TRANSPORT_ERROR"
    retryable = True

class UnexpectedError(AppError):
    """Raised in place of any unhandled exception; not worth retrying."""
    code = "UNEXPECTED_ERROR"
