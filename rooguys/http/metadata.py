"""Rate limit and request id extraction from response headers and bodies."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

RATE_LIMIT_WARNING_RATIO = 0.2


@dataclass(frozen=True)
class RateLimitInfo:
    """
    Rate limit counters reported with a response.

    Values that are present but not numeric come through as ``math.nan``
    rather than being clamped.
    """
    limit: int | float
    remaining: int | float
    reset: int | float

    @property
    def near_exhaustion(self) -> bool:
        # NaN compares false, so unparsable counters never warn
        return self.remaining < self.limit * RATE_LIMIT_WARNING_RATIO

    def to_dict(self) -> dict[str, int | float]:
        return {"limit": self.limit, "remaining": self.remaining, "reset": self.reset}


def _get_header(headers: Mapping[str, Any], name: str) -> str | None:
    value = headers.get(name) or headers.get(name.lower())
    if value is None or value == "":
        return None
    return str(value)


def parse_leading_int(raw: str) -> int | float:
    match = _LEADING_INT.match(raw)
    if match is None:
        return math.nan
    return int(match.group(1))


def extract_rate_limit_info(headers: Mapping[str, Any] | None) -> RateLimitInfo:
    headers = headers or {}
    return RateLimitInfo(
        limit=parse_leading_int(_get_header(headers, "X-RateLimit-Limit") or "1000"),
        remaining=parse_leading_int(_get_header(headers, "X-RateLimit-Remaining") or "1000"),
        reset=parse_leading_int(_get_header(headers, "X-RateLimit-Reset") or "0"),
    )


def extract_request_id(headers: Mapping[str, Any] | None, body: Any) -> str | None:
    """Header ``X-Request-Id`` wins; otherwise ``request_id`` / ``requestId`` from a mapping body."""
    header_value = _get_header(headers or {}, "X-Request-Id")
    if header_value:
        return header_value

    if isinstance(body, Mapping):
        value = body.get("request_id") or body.get("requestId")
        return str(value) if value else None

    return None
