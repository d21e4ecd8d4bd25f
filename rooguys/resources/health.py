from __future__ import annotations

from typing import Any

from rooguys.http.errors import RooguysError
from rooguys.resources.base import Resource


class HealthResource(Resource):
    async def check(self) -> Any:
        response = await self._http.get("/health")
        return response.data

    async def is_ready(self) -> bool:
        try:
            await self._http.get("/health")
        except RooguysError:
            return False
        return True
