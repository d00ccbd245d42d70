from __future__ import annotations

from typing import List

from pydantic import BaseModel


class StandingRow(BaseModel):
    rank: int
    player_index: int
    name: str
    played: int
    wins: int
    draws: int
    losses: int
    forfeits: int
    points: int
    win_rate: float
    podium: bool


class StandingsResponse(BaseModel):
    league_id: str
    league_name: str
    scoring_policy: str
    rows: List[StandingRow]
