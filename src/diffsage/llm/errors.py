"""Translate provider error bodies into structured error kinds.

Providers only report context-window violations in prose, so this is the one
place that looks at error text. Everything downstream branches on
``ErrorKind`` or the exception type.
"""

from __future__ import annotations

from diffsage.exceptions import ErrorKind, SizeRejectionError, TransportError

SIZE_LIMIT_MARKERS: tuple[str, ...] = (
    "context_length_exceeded",
    "maximum context length",
    "prompt is too long",
)


def classify_error(status_code: int | None, body: str) -> ErrorKind:
    """Map an HTTP status and error body to an ErrorKind."""
    if any(marker in body for marker in SIZE_LIMIT_MARKERS):
        return ErrorKind.OVERSIZE_REQUEST
    if status_code in (401, 403):
        return ErrorKind.AUTHENTICATION
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    return ErrorKind.OTHER


def provider_error(status_code: int | None, body: str) -> TransportError:
    """Build the exception to raise for a failed provider call."""
    kind = classify_error(status_code, body)
    if kind is ErrorKind.OVERSIZE_REQUEST:
        return SizeRejectionError(body, status_code=status_code)
    return TransportError(body, status_code=status_code, kind=kind)
