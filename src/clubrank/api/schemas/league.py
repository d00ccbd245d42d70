from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class LeagueResponse(BaseModel):
    league_id: str
    name: str
    players: List[str]


class LeagueCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    players: List[str] = Field(..., min_length=1)


class LeagueUpdateRequest(BaseModel):
    name: str | None = None
    players: List[str | None] | None = None


class SettingsResponse(BaseModel):
    players_per_group: int
    scoring_policy: str


class SettingsUpdateRequest(BaseModel):
    players_per_group: int | None = Field(default=None, ge=2, le=10)
    scoring_policy: str | None = None
