from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from rooguys.models import CacheMetadata, to_iso8601
from rooguys.resources.base import Resource, encode_segment
from rooguys.resources.users import Timeframe, with_percentile


def build_filter_params(
    *,
    page: int | None = None,
    limit: int | None = None,
    search: str | None = None,
    timeframe: Timeframe | None = None,
    persona: str | None = None,
    min_level: int | None = None,
    max_level: int | None = None,
    start_date: datetime | str | None = None,
    end_date: datetime | str | None = None,
) -> dict[str, Any]:
    params: dict[str, Any] = {
        "page": page,
        "limit": limit,
        "search": search,
        "persona": persona,
        "min_level": min_level,
        "max_level": max_level,
        "timeframe": timeframe,
    }
    if start_date is not None:
        params["start_date"] = to_iso8601(start_date)
    if end_date is not None:
        params["end_date"] = to_iso8601(end_date)
    return {key: value for key, value in params.items() if value is not None}


def parse_leaderboard(payload: Any) -> Any:
    """Parse ``cache_metadata`` into ``CacheMetadata`` and default ``percentile`` on rankings."""
    if not isinstance(payload, Mapping):
        return payload
    parsed = dict(payload)

    cache_data = parsed.pop("cache_metadata", None) or parsed.pop("cacheMetadata", None)
    if isinstance(cache_data, Mapping):
        parsed["cache_metadata"] = CacheMetadata.from_payload(cache_data)

    rankings = parsed.get("rankings")
    if isinstance(rankings, list):
        parsed["rankings"] = [with_percentile(entry) for entry in rankings]

    return parsed


class LeaderboardsResource(Resource):
    async def get_global(
        self, timeframe: Timeframe = "all-time", page: int = 1, limit: int = 50, **filters: Any
    ) -> Any:
        params = build_filter_params(timeframe=timeframe, page=page, limit=limit, **filters)
        response = await self._http.get("/leaderboards/global", params)
        return parse_leaderboard(response.data)

    async def list(self, page: int = 1, limit: int = 50, search: str | None = None) -> Any:
        response = await self._http.get("/leaderboards", {"page": page, "limit": limit, "search": search})
        return response.data

    async def get_custom(
        self,
        leaderboard_id: str,
        page: int = 1,
        limit: int = 50,
        search: str | None = None,
        **filters: Any,
    ) -> Any:
        params = build_filter_params(page=page, limit=limit, search=search or None, **filters)
        response = await self._http.get(f"/leaderboards/{encode_segment(leaderboard_id)}", params)
        return parse_leaderboard(response.data)

    async def get_user_rank(self, leaderboard_id: str, user_id: str) -> Any:
        response = await self._http.get(
            f"/leaderboards/{encode_segment(leaderboard_id)}/users/{encode_segment(user_id)}/rank"
        )
        return with_percentile(response.data)

    async def get_around_user(self, leaderboard_id: str, user_id: str, range: int = 5) -> Any:
        response = await self._http.get(
            f"/leaderboards/{encode_segment(leaderboard_id)}/users/{encode_segment(user_id)}/around",
            {"range": range},
        )
        return parse_leaderboard(response.data)
