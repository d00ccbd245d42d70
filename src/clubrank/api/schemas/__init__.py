"""Pydantic models for API I/O."""

from .league import (
    LeagueCreateRequest,
    LeagueResponse,
    LeagueUpdateRequest,
    SettingsResponse,
    SettingsUpdateRequest,
)
from .match import MatchDateUpdate, MatchRequest, MatchResponse
from .standings import StandingRow, StandingsResponse

__all__ = [
    "LeagueCreateRequest",
    "LeagueResponse",
    "LeagueUpdateRequest",
    "MatchDateUpdate",
    "MatchRequest",
    "MatchResponse",
    "SettingsResponse",
    "SettingsUpdateRequest",
    "StandingRow",
    "StandingsResponse",
]
