"""Scoring policies mapping match outcomes to point deltas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable


@dataclass(frozen=True)
class ScoringPolicy:
    name: str
    win: int
    draw: int
    loss: int
    forfeit: int
    description: str = ""


STANDARD = ScoringPolicy(
    name="standard",
    win=3,
    draw=1,
    loss=0,
    forfeit=-1,
    description="3 points per win, 1 per draw, -1 for the forfeiting player",
)

CLASSIC = ScoringPolicy(
    name="classic",
    win=1,
    draw=0,
    loss=0,
    forfeit=0,
    description="1 point per win, nothing else scores",
)

DEFAULT_POLICY = STANDARD.name

_POLICIES: Dict[str, ScoringPolicy] = {
    STANDARD.name: STANDARD,
    CLASSIC.name: CLASSIC,
}


def iter_policies() -> Iterable[ScoringPolicy]:
    """Return an iterator of all configured scoring policies."""

    return _POLICIES.values()


def get_policy(name: str) -> ScoringPolicy:
    """Fetch a policy by name, raising KeyError if missing."""

    key = name.strip().lower()
    if key not in _POLICIES:
        raise KeyError(f"No scoring policy named {name!r}")
    return _POLICIES[key]
