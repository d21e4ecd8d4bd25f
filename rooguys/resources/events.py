from __future__ import annotations

import warnings
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

from rooguys.models import parse_datetime, to_iso8601
from rooguys.resources.base import Resource, check_batch, validation_error

MAX_TIMESTAMP_AGE = timedelta(days=7)


def _checked_timestamp(value: datetime | str, *, field: str, prefix: str = "") -> str:
    try:
        timestamp = parse_datetime(value)
    except ValueError as exc:
        raise validation_error(
            f"{prefix}Invalid timestamp", "INVALID_TIMESTAMP", field, "Timestamp must be ISO-8601"
        ) from exc
    if timestamp is None:
        raise validation_error(f"{prefix}Invalid timestamp", "INVALID_TIMESTAMP", field, "Timestamp must be ISO-8601")
    if timestamp < datetime.now(timezone.utc) - MAX_TIMESTAMP_AGE:
        raise validation_error(
            f"{prefix}Custom timestamp cannot be more than 7 days in the past",
            "TIMESTAMP_TOO_OLD",
            field,
            "Timestamp must be within the last 7 days",
        )
    return to_iso8601(timestamp)


class EventsResource(Resource):
    async def track(
        self,
        event_name: str,
        user_id: str,
        properties: Mapping[str, Any] | None = None,
        *,
        include_profile: bool | None = None,
        idempotency_key: str | None = None,
        timestamp: datetime | str | None = None,
    ) -> Any:
        body: dict[str, Any] = {
            "event_name": event_name,
            "user_id": user_id,
            "properties": dict(properties or {}),
        }
        if timestamp:
            body["timestamp"] = _checked_timestamp(timestamp, field="timestamp")

        response = await self._http.post(
            "/events",
            body,
            params={"include_profile": include_profile},
            idempotency_key=idempotency_key,
        )
        return response.data

    async def track_batch(
        self, events: Sequence[Mapping[str, Any]], *, idempotency_key: str | None = None
    ) -> Any:
        """
        Track up to 100 events in one request.

        Each item needs ``event_name`` and ``user_id``; ``properties`` and
        ``timestamp`` are optional. Validation happens before the request
        is sent, so a single bad timestamp rejects the whole batch.
        """
        check_batch(events, noun="events", code_prefix="EVENTS")

        payload = []
        for index, event in enumerate(events):
            item: dict[str, Any] = {
                "event_name": event.get("event_name"),
                "user_id": event.get("user_id"),
                "properties": dict(event.get("properties") or {}),
            }
            if event.get("timestamp"):
                item["timestamp"] = _checked_timestamp(
                    event["timestamp"], field=f"events[{index}].timestamp", prefix=f"Event at index {index}: "
                )
            payload.append(item)

        response = await self._http.post("/events/batch", {"events": payload}, idempotency_key=idempotency_key)
        return response.data

    async def track_legacy(
        self,
        event_name: str,
        user_id: str,
        properties: Mapping[str, Any] | None = None,
        *,
        include_profile: bool | None = None,
    ) -> Any:
        warnings.warn(
            "events.track_legacy() uses the deprecated /v1/event endpoint; use events.track() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        response = await self._http.post(
            "/event",
            {"event_name": event_name, "user_id": user_id, "properties": dict(properties or {})},
            params={"include_profile": include_profile},
        )
        return response.data
