"""
Value objects shared by the executor and the resource namespaces.

Pagination and cache metadata ride along with API responses; the helpers
at the bottom convert between ISO-8601 strings and timezone-aware
datetimes the way the API expects them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from rooguys.http.errors import FieldError

__all__ = ["CacheMetadata", "FieldError", "Pagination", "parse_datetime", "parse_server_datetime", "to_iso8601"]


@dataclass(frozen=True)
class Pagination:
    """
    Page window reported by list endpoints.

    Attributes:
        page: 1-based page number.
        limit: Page size.
        total: Total number of items across all pages.
        total_pages: Number of pages (``totalPages`` on the wire).
    """
    page: int | None = None
    limit: int | None = None
    total: int | None = None
    total_pages: int | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Pagination | None":
        if not payload or not isinstance(payload, Mapping):
            return None
        total_pages = payload.get("totalPages")
        if total_pages is None:
            total_pages = payload.get("total_pages")
        return cls(
            page=payload.get("page"),
            limit=payload.get("limit"),
            total=payload.get("total"),
            total_pages=total_pages,
        )

    def to_dict(self) -> dict[str, int | None]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "totalPages": self.total_pages}


@dataclass(frozen=True)
class CacheMetadata:
    cached_at: datetime | None
    ttl: int

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CacheMetadata":
        return cls(cached_at=parse_server_datetime(payload.get("cached_at")), ttl=int(payload.get("ttl") or 0))


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix allowed); naive values are taken as UTC."""
    if not value:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_server_datetime(value: Any) -> datetime | None:
    """
    Lenient variant of ``parse_datetime`` for timestamps the API sends back.

    Numbers are read as epoch milliseconds. Values that cannot be parsed
    become ``None`` instead of raising.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    try:
        return parse_datetime(value)
    except (TypeError, ValueError):
        return None


def to_iso8601(value: datetime | str) -> str:
    dt = parse_datetime(value)
    if dt is None:
        raise ValueError("timestamp is empty")
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
