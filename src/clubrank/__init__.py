"""Club ranking: leagues, match results and standings."""

from clubrank.models import League, Match, PlayerStat, Settings, Winner
from clubrank.standings import compute_standings

__all__ = [
    "League",
    "Match",
    "PlayerStat",
    "Settings",
    "Winner",
    "compute_standings",
]
