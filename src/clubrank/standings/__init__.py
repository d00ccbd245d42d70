"""Standings engine and its presentation helpers."""

from .export import export_history_to_csv, export_standings_to_csv
from .history import describe_match, winner_name
from .service import compute_standings

__all__ = [
    "compute_standings",
    "describe_match",
    "export_history_to_csv",
    "export_standings_to_csv",
    "winner_name",
]
