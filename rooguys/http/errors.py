"""
Rooguys API error taxonomy.

Every failure the client surfaces is a ``RooguysError`` subclass tagged
with an ``ErrorKind``. HTTP statuses map onto kinds through a fixed table:

    HTTP 400 → ValidationError      (also logical envelope errors)
    HTTP 401 → AuthenticationError
    HTTP 403 → ForbiddenError
    HTTP 404 → NotFoundError
    HTTP 409 → ConflictError
    HTTP 429 → RateLimitError       (only kind the executor retries)
    HTTP 5xx → ServerError
    other    → RooguysError         (status preserved)

Transport failures without a response are plain ``RooguysError`` with
code ``TIMEOUT`` (408) or ``NETWORK_ERROR`` (0).
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from rooguys.http.metadata import parse_leading_int

DEFAULT_MESSAGE = "An error occurred"
DEFAULT_RETRY_AFTER_S = 60


class ErrorKind(str, Enum):
    GENERIC = "generic"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


# Not frozen: contextlib and add_note assign __traceback__ and __notes__.
@dataclass(eq=False)
class RooguysError(Exception):
    """
    Base exception for all Rooguys API errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code from the API (or a client default).
        request_id: Server request identifier, when one was observed.
        status_code: HTTP status (0 for network failures).
    """
    kind: ClassVar[ErrorKind] = ErrorKind.GENERIC

    message: str
    code: str = "UNKNOWN_ERROR"
    request_id: str | None = None
    status_code: int = 500

    def __str__(self) -> str:
        parts = [self.message, f"code={self.code}", f"status={self.status_code}"]
        if self.request_id:
            parts.append(f"request_id={self.request_id}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": type(self).__name__,
            "kind": self.kind.value,
            "message": self.message,
            "code": self.code,
            "request_id": self.request_id,
            "status_code": self.status_code,
        }


@dataclass(eq=False)
class ValidationError(RooguysError):
    """HTTP 400 - request rejected, optionally with per-field details."""
    kind: ClassVar[ErrorKind] = ErrorKind.VALIDATION

    code: str = "VALIDATION_ERROR"
    status_code: int = 400
    field_errors: tuple[FieldError, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["field_errors"] = (
            [{"field": item.field, "message": item.message} for item in self.field_errors]
            if self.field_errors is not None
            else None
        )
        return payload


@dataclass(eq=False)
class AuthenticationError(RooguysError):
    """HTTP 401 - API key missing or invalid."""
    kind: ClassVar[ErrorKind] = ErrorKind.AUTHENTICATION

    code: str = "AUTHENTICATION_ERROR"
    status_code: int = 401


@dataclass(eq=False)
class ForbiddenError(RooguysError):
    """HTTP 403 - access denied."""
    kind: ClassVar[ErrorKind] = ErrorKind.FORBIDDEN

    code: str = "FORBIDDEN"
    status_code: int = 403


@dataclass(eq=False)
class NotFoundError(RooguysError):
    """HTTP 404 - resource does not exist."""
    kind: ClassVar[ErrorKind] = ErrorKind.NOT_FOUND

    code: str = "NOT_FOUND"
    status_code: int = 404


@dataclass(eq=False)
class ConflictError(RooguysError):
    """HTTP 409 - resource already exists or state conflict."""
    kind: ClassVar[ErrorKind] = ErrorKind.CONFLICT

    code: str = "CONFLICT"
    status_code: int = 409


@dataclass(eq=False)
class RateLimitError(RooguysError):
    """
    HTTP 429 - rate limit exceeded.

    ``retry_after`` is the server-declared wait in seconds. The executor
    sleeps exactly this long before each automatic retry.
    """
    kind: ClassVar[ErrorKind] = ErrorKind.RATE_LIMIT

    code: str = "RATE_LIMIT_EXCEEDED"
    status_code: int = 429
    retry_after: int = DEFAULT_RETRY_AFTER_S

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["retry_after"] = self.retry_after
        return payload


@dataclass(eq=False)
class ServerError(RooguysError):
    """HTTP 5xx - server side failure."""
    kind: ClassVar[ErrorKind] = ErrorKind.SERVER

    code: str = "SERVER_ERROR"


def _coerce_field_errors(details: Any) -> tuple[FieldError, ...] | None:
    if not details or not isinstance(details, (list, tuple)):
        return None
    items = []
    for item in details:
        if isinstance(item, Mapping):
            items.append(FieldError(field=str(item.get("field", "")), message=str(item.get("message", ""))))
    return tuple(items)


def _parse_retry_after(headers: Mapping[str, Any] | None) -> int:
    if not headers:
        return DEFAULT_RETRY_AFTER_S
    raw = headers.get("retry-after") or headers.get("Retry-After")
    if raw is None:
        return DEFAULT_RETRY_AFTER_S
    seconds = parse_leading_int(str(raw))
    if math.isnan(seconds):
        return DEFAULT_RETRY_AFTER_S
    return int(seconds)


def map_status_to_error(
    status: int,
    error_body: Any,
    request_id: str | None,
    headers: Mapping[str, Any] | None = None,
) -> RooguysError:
    """
    Classify an HTTP status and error body into exactly one typed error.

    Accepts flat bodies (``{message, code, details}``) and bodies whose
    ``error`` is either a string or an object of the same shape. Never
    raises; malformed input degrades to defaults.
    """
    body = error_body if isinstance(error_body, Mapping) else {}
    raw_error = body.get("error")
    error_obj = raw_error if isinstance(raw_error, Mapping) else {}

    message = (
        error_obj.get("message")
        or (raw_error if isinstance(raw_error, str) else None)
        or body.get("message")
        or DEFAULT_MESSAGE
    )
    message = str(message)
    code = str(error_obj.get("code") or body.get("code") or "UNKNOWN_ERROR")

    if status == 400:
        field_errors = _coerce_field_errors(error_obj.get("details") or body.get("details"))
        return ValidationError(message, code=code, request_id=request_id, field_errors=field_errors)
    if status == 401:
        return AuthenticationError(message, code=code, request_id=request_id)
    if status == 403:
        return ForbiddenError(message, code=code, request_id=request_id)
    if status == 404:
        return NotFoundError(message, code=code, request_id=request_id)
    if status == 409:
        return ConflictError(message, code=code, request_id=request_id)
    if status == 429:
        return RateLimitError(
            message, code=code, request_id=request_id, retry_after=_parse_retry_after(headers)
        )
    if status >= 500:
        return ServerError(message, code=code, request_id=request_id, status_code=status)
    return RooguysError(message, code=code, request_id=request_id, status_code=status)
