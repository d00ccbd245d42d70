"""Default league layout and environment-driven settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from clubrank.models import placeholder_names

from .scoring import get_policy

logger = logging.getLogger(__name__)

MIN_PLAYERS_PER_GROUP = 2
MAX_PLAYERS_PER_GROUP = 10
DEFAULT_PLAYERS_PER_GROUP = 5

DB_PATH_ENV = "CLUBRANK_DB_PATH"
ADMIN_TOKEN_ENV = "CLUBRANK_ADMIN_TOKEN"
SCORING_ENV = "CLUBRANK_SCORING"
PLAYERS_PER_GROUP_ENV = "CLUBRANK_PLAYERS_PER_GROUP"

DEFAULT_LEAGUE_NAMES: Tuple[str, ...] = (
    "Lord of the Rings",
    "League B",
    "League C",
    "League D",
)


@dataclass(frozen=True)
class LeagueSeed:
    name: str
    players: Tuple[str, ...]


def _env_int(name: str, default: int, *, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


def env_players_per_group() -> int:
    return _env_int(
        PLAYERS_PER_GROUP_ENV,
        DEFAULT_PLAYERS_PER_GROUP,
        min_value=MIN_PLAYERS_PER_GROUP,
        max_value=MAX_PLAYERS_PER_GROUP,
    )


def env_scoring_policy(default: str) -> str:
    raw = os.getenv(SCORING_ENV)
    if not raw:
        return default
    try:
        return get_policy(raw).name
    except KeyError:
        logger.warning("Unknown scoring policy for %s: %s; using default %s", SCORING_ENV, raw, default)
        return default


def validate_players_per_group(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"players_per_group must be an integer, got {value!r}")
    if not MIN_PLAYERS_PER_GROUP <= value <= MAX_PLAYERS_PER_GROUP:
        raise ValueError(
            f"players_per_group must be between {MIN_PLAYERS_PER_GROUP} and "
            f"{MAX_PLAYERS_PER_GROUP}, got {value}"
        )
    return value


def league_id_for(position: int) -> str:
    return f"league-{position}"


def default_leagues(players_per_group: int = DEFAULT_PLAYERS_PER_GROUP) -> List[LeagueSeed]:
    """Build the seeded leagues, numbering placeholder players across leagues."""

    seeds: List[LeagueSeed] = []
    for position, name in enumerate(DEFAULT_LEAGUE_NAMES):
        start = position * players_per_group + 1
        seeds.append(LeagueSeed(name=name, players=tuple(placeholder_names(start, players_per_group))))
    return seeds


def resize_roster(players: Sequence[str], size: int, *, offset: int = 0) -> Tuple[str, ...]:
    """Truncate or pad a roster to ``size`` players.

    New seats are named after their club-wide number, ``offset`` being the
    league's position times the group size.
    """

    if len(players) >= size:
        return tuple(players[:size])
    missing = size - len(players)
    return tuple(players) + tuple(placeholder_names(offset + len(players) + 1, missing))
