"""The ``Rooguys`` client facade."""

from __future__ import annotations

import logging

import httpx

from rooguys.config import ClientConfig
from rooguys.http.client import HttpClient, RateLimitWarningHook
from rooguys.http.errors import ValidationError
from rooguys.resources import (
    AhaResource,
    BadgesResource,
    EventsResource,
    HealthResource,
    LeaderboardsResource,
    LevelsResource,
    QuestionnairesResource,
    UsersResource,
)


class Rooguys:
    """
    Async client for the Rooguys gamification API.

    All resource namespaces share one ``HttpClient``; use the client as an
    async context manager (or call ``aclose``) to release connections.

    Example:
        >>> async with Rooguys("sk_live_...") as client:
        ...     profile = await client.users.get("user_123")
    """

    def __init__(
        self,
        api_key: str,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
        on_rate_limit_warning: RateLimitWarningHook | None = None,
    ) -> None:
        if not api_key:
            raise ValidationError("API key is required", code="MISSING_API_KEY")

        self.http = HttpClient(
            api_key,
            config,
            transport=transport,
            logger=logger,
            on_rate_limit_warning=on_rate_limit_warning,
        )
        self.events = EventsResource(self.http)
        self.users = UsersResource(self.http)
        self.leaderboards = LeaderboardsResource(self.http)
        self.badges = BadgesResource(self.http)
        self.levels = LevelsResource(self.http)
        self.questionnaires = QuestionnairesResource(self.http)
        self.aha = AhaResource(self.http)
        self.health = HealthResource(self.http)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "Rooguys":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
