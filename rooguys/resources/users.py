from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from rooguys.models import parse_server_datetime
from rooguys.resources.base import Resource, check_batch, encode_segment, is_valid_email, validation_error

Timeframe = Literal["all-time", "weekly", "monthly"]

_USER_FIELDS = ("user_id", "display_name", "email", "first_name", "last_name", "metadata")


def build_user_body(user: Mapping[str, Any]) -> dict[str, Any]:
    return {key: user[key] for key in _USER_FIELDS if key in user}


def _check_user(user: Any, *, prefix: str = "", field_prefix: str = "") -> None:
    if not isinstance(user, Mapping) or not user.get("user_id"):
        raise validation_error(
            f"{prefix}User ID is required", "MISSING_USER_ID", f"{field_prefix}user_id", "User ID is required"
        )
    _check_email(user, prefix=prefix, field_prefix=field_prefix)


def _check_email(user: Mapping[str, Any], *, prefix: str = "", field_prefix: str = "") -> None:
    if not is_valid_email(user.get("email")):
        raise validation_error(
            f"{prefix}Invalid email format",
            "INVALID_EMAIL",
            f"{field_prefix}email",
            "Email must be a valid email address",
        )


def parse_user_profile(profile: Any) -> Any:
    """Fill defaults for nested summaries and turn their timestamps into datetimes."""
    if not isinstance(profile, Mapping):
        return profile
    parsed = dict(profile)

    activity = profile.get("activity_summary")
    if activity:
        parsed["activity_summary"] = {
            "last_event_at": parse_server_datetime(activity.get("last_event_at")),
            "event_count": activity.get("event_count") or 0,
            "days_active": activity.get("days_active") or 0,
        }

    streak = profile.get("streak")
    if streak:
        parsed["streak"] = {
            "current_streak": streak.get("current_streak") or 0,
            "longest_streak": streak.get("longest_streak") or 0,
            "last_activity_at": parse_server_datetime(streak.get("last_activity_at")),
            "streak_started_at": parse_server_datetime(streak.get("streak_started_at")),
        }

    inventory = profile.get("inventory")
    if inventory:
        parsed["inventory"] = {
            "item_count": inventory.get("item_count") or 0,
            "active_effects": inventory.get("active_effects") or [],
        }

    return parsed


def with_percentile(payload: Any) -> Any:
    if not isinstance(payload, Mapping):
        return payload
    return {**payload, "percentile": payload.get("percentile")}


def _fields_param(fields: Sequence[str] | None) -> str | None:
    return ",".join(fields) if fields else None


class UsersResource(Resource):
    async def create(self, user: Mapping[str, Any]) -> Any:
        _check_user(user)
        response = await self._http.post("/users", build_user_body(user))
        return parse_user_profile(response.data)

    async def update(self, user_id: str, user: Mapping[str, Any]) -> Any:
        if not user_id:
            raise validation_error("User ID is required", "MISSING_USER_ID", "user_id", "User ID is required")
        _check_email(user)
        response = await self._http.patch(f"/users/{encode_segment(user_id)}", build_user_body(user))
        return parse_user_profile(response.data)

    async def create_batch(self, users: Sequence[Mapping[str, Any]]) -> Any:
        check_batch(users, noun="users", code_prefix="USERS")
        for index, user in enumerate(users):
            _check_user(user, prefix=f"User at index {index}: ", field_prefix=f"users[{index}].")
        response = await self._http.post("/users/batch", {"users": [build_user_body(user) for user in users]})
        return response.data

    async def get(self, user_id: str, *, fields: Sequence[str] | None = None) -> Any:
        response = await self._http.get(f"/users/{encode_segment(user_id)}", {"fields": _fields_param(fields)})
        return parse_user_profile(response.data)

    async def search(
        self, query: str, *, page: int = 1, limit: int = 50, fields: Sequence[str] | None = None
    ) -> Any:
        response = await self._http.get(
            "/users/search",
            {"q": query, "page": page, "limit": limit, "fields": _fields_param(fields)},
        )
        data = response.data
        if isinstance(data, Mapping):
            data = {**data, "users": [parse_user_profile(user) for user in data.get("users") or []]}
        return data

    async def get_bulk(self, user_ids: Sequence[str]) -> Any:
        response = await self._http.post("/users/bulk", {"user_ids": list(user_ids)})
        data = response.data
        if isinstance(data, Mapping):
            data = {**data, "users": [parse_user_profile(user) for user in data.get("users") or []]}
        return data

    async def get_badges(self, user_id: str) -> Any:
        response = await self._http.get(f"/users/{encode_segment(user_id)}/badges")
        return response.data

    async def get_rank(self, user_id: str, timeframe: Timeframe = "all-time") -> Any:
        response = await self._http.get(f"/users/{encode_segment(user_id)}/rank", {"timeframe": timeframe})
        return with_percentile(response.data)

    async def submit_answers(
        self, user_id: str, questionnaire_id: str, answers: Sequence[Mapping[str, str]]
    ) -> Any:
        response = await self._http.post(
            f"/users/{encode_segment(user_id)}/answers",
            {"questionnaire_id": questionnaire_id, "answers": [dict(answer) for answer in answers]},
        )
        return response.data
