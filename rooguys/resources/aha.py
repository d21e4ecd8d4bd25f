from __future__ import annotations

from typing import Any

from rooguys.resources.base import Resource, encode_segment, validation_error


class AhaResource(Resource):
    async def declare(self, user_id: str, value: int) -> Any:
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
            raise validation_error(
                "Aha score value must be an integer between 1 and 5",
                "INVALID_AHA_VALUE",
                "value",
                "value must be an integer between 1 and 5",
            )
        response = await self._http.post("/aha/declare", {"user_id": user_id, "value": value})
        return response.data

    async def get_user_score(self, user_id: str) -> Any:
        response = await self._http.get(f"/users/{encode_segment(user_id)}/aha")
        return response.data
