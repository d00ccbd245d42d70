"""CSV export helpers for league standings and match history."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from clubrank.models import League, Match, PlayerStat

from .history import describe_match

STANDINGS_HEADERS = ("rank", "player", "played", "wins", "draws", "losses", "forfeits", "points")
HISTORY_HEADERS = ("match_id", "date", "league", "result")


def export_standings_to_csv(standings: Sequence[PlayerStat]) -> str:
    """Render a ranked table as CSV, one row per player in rank order."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(STANDINGS_HEADERS)
    for rank, stat in enumerate(standings, start=1):
        writer.writerow([
            rank,
            stat.name,
            stat.played,
            stat.wins,
            stat.draws,
            stat.losses,
            stat.forfeits,
            stat.points,
        ])
    return buffer.getvalue()


def export_history_to_csv(league: League, matches: Sequence[Match]) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(HISTORY_HEADERS)
    for match in matches:
        writer.writerow([
            match.match_id,
            match.date.isoformat(),
            league.name,
            describe_match(league, match),
        ])
    return buffer.getvalue()


__all__ = [
    "export_history_to_csv",
    "export_standings_to_csv",
]
