from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MatchRequest(BaseModel):
    league_id: str
    player1: int = Field(..., ge=0)
    player2: int = Field(..., ge=0)
    winner: int | str
    date: datetime | None = None


class MatchDateUpdate(BaseModel):
    date: datetime


class MatchResponse(BaseModel):
    match_id: str
    league_id: str
    league_name: str | None = None
    player1: int
    player2: int
    winner: int | str | None
    outcome: str
    winner_name: str | None = None
    summary: str
    date: datetime
