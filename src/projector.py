"""Projection of internal outcomes onto the outward HTTP response."""
from typing import Any, Dict, Optional, Tuple

from fastapi import status

from .events import EventSink, emit
from .exceptions import AppError, UnexpectedError


def envelope(
    message: str,
    code: str,
    retryable: bool = False,
    details: Optional[str] = None,
    hint: Optional[str] = None,
    raw: Any = None,
) -> Dict[str, Any]:
    """Uniform error payload; optional keys only appear when set."""
    body: Dict[str, Any] = {"error": message, "code": code, "retryable": retryable}
    if details is not None:
        body["details"] = details
    if hint is not None:
        body["hint"] = hint
    if raw is not None:
        body["raw"] = raw
    return body


def project_error(exc: Exception, sink: Optional[EventSink] = None) -> Tuple[int, Dict[str, Any]]:
    """Map any failure to ``(status, payload)``.

    ``AppError`` subclasses carry their own status; anything else is an
    unexpected failure and becomes a 500 with the message as details.
    """
    if not isinstance(exc, AppError):
        exc = UnexpectedError("Unexpected server error", str(exc) or type(exc).__name__)
    emit(sink, "projector.error", status=exc.status_code, code=exc.code)
    return exc.status_code, envelope(exc.message, exc.code, exc.retryable, exc.details, exc.hint, exc.raw)


def project_success(result: Any, sink: Optional[EventSink] = None) -> Tuple[int, Any]:
    emit(sink, "projector.success", status=status.HTTP_200_OK, result=type(result).__name__)
    return status.HTTP_200_OK, result
