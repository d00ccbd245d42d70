"""Canonical league, match and standings models shared across the store and engine."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

WinnerKind = Literal["player", "draw", "forfeit", "unknown"]

DRAW = "draw"
_FORFEIT_RE = re.compile(r"^forfeit-(\d+)$")


class Winner(BaseModel):
    """Decoded match outcome.

    ``player_index`` names the winner for ``player`` outcomes and the
    forfeiting player for ``forfeit`` outcomes. ``raw`` keeps the stored value
    so an ``unknown`` outcome can be written back untouched.
    """

    kind: WinnerKind
    player_index: Optional[int] = None
    raw: Any = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def player(cls, index: int) -> "Winner":
        return cls(kind="player", player_index=index, raw=index)

    @classmethod
    def draw(cls) -> "Winner":
        return cls(kind="draw", raw=DRAW)

    @classmethod
    def forfeit(cls, index: int) -> "Winner":
        return cls(kind="forfeit", player_index=index, raw=f"forfeit-{index}")

    @classmethod
    def decode(cls, value: Any) -> "Winner":
        """Decode a stored winner value, never raising."""

        if isinstance(value, bool):
            return cls(kind="unknown", raw=value)
        if isinstance(value, int):
            return cls.player(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if text == DRAW:
                return cls.draw()
            match = _FORFEIT_RE.match(text)
            if match:
                return cls.forfeit(int(match.group(1)))
            if text.isdigit():
                return cls.player(int(text))
        return cls(kind="unknown", raw=value)

    def encode(self) -> Any:
        if self.kind == "player":
            return self.player_index
        if self.kind == "draw":
            return DRAW
        if self.kind == "forfeit":
            return f"forfeit-{self.player_index}"
        return self.raw


class League(BaseModel):
    """League snapshot. Player identity is the position in ``players``."""

    league_id: str = Field(..., min_length=1)
    name: str
    players: Tuple[str, ...]

    model_config = ConfigDict(frozen=True)


class Match(BaseModel):
    """Recorded result between two players of one league."""

    match_id: str = Field(..., min_length=1)
    league_id: str
    player1: int
    player2: int
    winner: Winner
    date: datetime

    model_config = ConfigDict(frozen=True)

    @property
    def participants(self) -> Tuple[int, int]:
        return (self.player1, self.player2)


class PlayerStat(BaseModel):
    """Per-player totals computed from a league's matches."""

    player_index: int
    name: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    forfeits: int = 0
    points: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def win_rate(self) -> float:
        return self.wins / self.played if self.played else 0.0


class Settings(BaseModel):
    players_per_group: int = Field(default=5, ge=2, le=10)
    scoring_policy: str = "standard"

    model_config = ConfigDict(frozen=True)


def placeholder_names(start: int, count: int) -> List[str]:
    """Return ``count`` placeholder names numbered from ``start``."""

    return [f"Player {number}" for number in range(start, start + count)]
