"""Domain models for leagues, matches and standings."""

from .league import League, Match, PlayerStat, Settings, Winner, placeholder_names

__all__ = [
    "League",
    "Match",
    "PlayerStat",
    "Settings",
    "Winner",
    "placeholder_names",
]
