"""Read-only catalog endpoints: badges, levels, questionnaires."""

from __future__ import annotations

from typing import Any

from rooguys.resources.base import Resource, encode_segment


class BadgesResource(Resource):
    async def list(self, page: int = 1, limit: int = 50, active_only: bool = False) -> Any:
        response = await self._http.get("/badges", {"page": page, "limit": limit, "active_only": active_only})
        return response.data


class LevelsResource(Resource):
    async def list(self, page: int = 1, limit: int = 50) -> Any:
        response = await self._http.get("/levels", {"page": page, "limit": limit})
        return response.data


class QuestionnairesResource(Resource):
    async def get(self, slug: str) -> Any:
        response = await self._http.get(f"/questionnaires/{encode_segment(slug)}")
        return response.data

    async def get_active(self) -> Any:
        response = await self._http.get("/questionnaires/active")
        return response.data
