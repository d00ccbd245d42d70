"""Configuration helpers for scoring policies and league defaults."""

from .leagues import (
    DEFAULT_PLAYERS_PER_GROUP,
    MAX_PLAYERS_PER_GROUP,
    MIN_PLAYERS_PER_GROUP,
    LeagueSeed,
    default_leagues,
    league_id_for,
    resize_roster,
    validate_players_per_group,
)
from .scoring import CLASSIC, DEFAULT_POLICY, STANDARD, ScoringPolicy, get_policy, iter_policies

__all__ = [
    "CLASSIC",
    "DEFAULT_PLAYERS_PER_GROUP",
    "DEFAULT_POLICY",
    "LeagueSeed",
    "MAX_PLAYERS_PER_GROUP",
    "MIN_PLAYERS_PER_GROUP",
    "STANDARD",
    "ScoringPolicy",
    "default_leagues",
    "get_policy",
    "iter_policies",
    "league_id_for",
    "resize_roster",
    "validate_players_per_group",
]
