from rooguys.resources.aha import AhaResource
from rooguys.resources.catalog import BadgesResource, LevelsResource, QuestionnairesResource
from rooguys.resources.events import EventsResource
from rooguys.resources.health import HealthResource
from rooguys.resources.leaderboards import LeaderboardsResource
from rooguys.resources.users import UsersResource

__all__ = [
    "AhaResource",
    "BadgesResource",
    "EventsResource",
    "HealthResource",
    "LeaderboardsResource",
    "LevelsResource",
    "QuestionnairesResource",
    "UsersResource",
]
