"""
Decoding of the Rooguys response envelope.

The current API wraps every body as
``{"success": bool, "data": ..., "error": ..., "request_id": ..., "pagination": ...}``.
Older endpoints return the result object directly. Bodies are decoded into
one ``ParsedBody`` tagged with the shape that was recognised:

- ``SUCCESS``: ``success is True``; ``data`` unwrapped (or the whole body
  when there is no ``data`` key).
- ``FAILURE``: ``success is False``; only ``error`` and ``request_id``.
- ``LEGACY``: mapping without a boolean ``success``; the body is the data.
- ``PASSTHROUGH``: anything that is not a mapping, returned unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from rooguys.models import Pagination


class EnvelopeKind(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    LEGACY = "legacy"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True)
class ParsedBody:
    kind: EnvelopeKind
    data: Any = None
    error: Any = None
    pagination: Pagination | None = None
    request_id: str | None = None

    @property
    def has_data(self) -> bool:
        return self.kind is not EnvelopeKind.FAILURE

    @property
    def is_error(self) -> bool:
        return self.kind is EnvelopeKind.FAILURE and bool(self.error)


def _request_id(body: Mapping[str, Any]) -> str | None:
    value = body.get("request_id")
    return str(value) if value else None


def parse_response_body(body: Any) -> ParsedBody:
    """Decode a response body; never raises."""
    if not isinstance(body, Mapping):
        return ParsedBody(kind=EnvelopeKind.PASSTHROUGH, data=body)

    success = body.get("success")
    if isinstance(success, bool):
        if success:
            return ParsedBody(
                kind=EnvelopeKind.SUCCESS,
                data=body["data"] if "data" in body else body,
                pagination=Pagination.from_payload(body.get("pagination")),
                request_id=_request_id(body),
            )
        return ParsedBody(
            kind=EnvelopeKind.FAILURE,
            error=body.get("error"),
            request_id=_request_id(body),
        )

    return ParsedBody(
        kind=EnvelopeKind.LEGACY,
        data=body,
        pagination=Pagination.from_payload(body.get("pagination")),
    )
