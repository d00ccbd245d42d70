"""Persist and load league seed profiles used when resetting club data."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List

from clubrank.config.leagues import LeagueSeed


@dataclass
class LeagueProfile:
    leagues: List[LeagueSeed]

    @classmethod
    def load(cls, path: Path) -> "LeagueProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        leagues: List[LeagueSeed] = []
        for entry in data.get("leagues", []):
            name = str(entry.get("name", "")).strip()
            players = tuple(str(player).strip() for player in entry.get("players", []))
            if not name or not players or not all(players):
                raise ValueError(f"Invalid league entry in {path}: {entry!r}")
            leagues.append(LeagueSeed(name=name, players=players))
        if not leagues:
            raise ValueError(f"No leagues defined in {path}")
        return cls(leagues=leagues)

    def save(self, path: Path) -> None:
        payload = {
            "leagues": [
                {"name": league.name, "players": list(league.players)}
                for league in self.leagues
            ],
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
