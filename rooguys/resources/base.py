from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

from rooguys.http.client import HttpClient
from rooguys.http.errors import FieldError, ValidationError

MAX_BATCH_SIZE = 100

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def encode_segment(value: Any) -> str:
    return quote(str(value), safe="")


def is_valid_email(email: Any) -> bool:
    # empty or non-string values are treated as "not provided"
    if not email or not isinstance(email, str):
        return True
    return _EMAIL_RE.match(email) is not None


def validation_error(message: str, code: str, field: str, field_message: str) -> ValidationError:
    return ValidationError(message, code=code, field_errors=(FieldError(field=field, message=field_message),))


def check_batch(items: Any, *, noun: str, code_prefix: str) -> Sequence[Any]:
    """Reject non-list, empty, and oversized batches before anything is sent."""
    if not isinstance(items, (list, tuple)):
        raise validation_error(
            f"{noun.capitalize()} must be an array", f"INVALID_{code_prefix}", noun, f"{noun.capitalize()} must be an array"
        )
    if not items:
        raise validation_error(
            f"{noun.capitalize()} array cannot be empty",
            f"EMPTY_{code_prefix}",
            noun,
            f"At least one {noun[:-1]} is required",
        )
    if len(items) > MAX_BATCH_SIZE:
        raise validation_error(
            f"Batch size exceeds maximum of {MAX_BATCH_SIZE} {noun}",
            "BATCH_TOO_LARGE",
            noun,
            f"Maximum batch size is {MAX_BATCH_SIZE} {noun}",
        )
    return items


class Resource:
    def __init__(self, http: HttpClient) -> None:
        self._http = http
