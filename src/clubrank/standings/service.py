"""Standings computation: aggregate match outcomes and rank players."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from clubrank.config.scoring import STANDARD, ScoringPolicy
from clubrank.models import League, Match, PlayerStat

logger = logging.getLogger(__name__)


@dataclass
class _Tally:
    player_index: int
    name: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    forfeits: int = 0
    points: int = 0

    def freeze(self) -> PlayerStat:
        return PlayerStat(
            player_index=self.player_index,
            name=self.name,
            played=self.played,
            wins=self.wins,
            draws=self.draws,
            losses=self.losses,
            forfeits=self.forfeits,
            points=self.points,
        )


def _resolve(tallies: List[_Tally], index: int) -> Optional[_Tally]:
    if isinstance(index, bool) or not isinstance(index, int):
        return None
    if 0 <= index < len(tallies):
        return tallies[index]
    return None


def _apply_match(tallies: List[_Tally], match: Match, policy: ScoringPolicy) -> None:
    first = _resolve(tallies, match.player1)
    second = _resolve(tallies, match.player2)
    if first is None or second is None:
        logger.debug("Skipping match %s: participant outside roster", match.match_id)
        return
    if first is second:
        logger.debug("Skipping match %s: player %d faces themselves", match.match_id, match.player1)
        return

    first.played += 1
    second.played += 1

    winner = match.winner
    if winner.kind == "draw":
        for tally in (first, second):
            tally.draws += 1
            tally.points += policy.draw
    elif winner.kind == "forfeit" and winner.player_index in match.participants:
        forfeiter = first if winner.player_index == match.player1 else second
        forfeiter.forfeits += 1
        forfeiter.losses += 1
        forfeiter.points += policy.forfeit
    elif winner.kind == "player" and winner.player_index in match.participants:
        victor, loser = (first, second) if winner.player_index == match.player1 else (second, first)
        victor.wins += 1
        victor.points += policy.win
        loser.losses += 1
        loser.points += policy.loss
    else:
        logger.debug("Match %s has unrecognised winner %r; counting as played only", match.match_id, winner.raw)


def _ranking_key(stat: PlayerStat) -> tuple[int, int, float]:
    return (-stat.points, -stat.wins, -stat.win_rate)


def compute_standings(
    league: League,
    matches: Iterable[Match],
    policy: ScoringPolicy = STANDARD,
) -> List[PlayerStat]:
    """Return the league's players ranked by points, wins and win rate.

    Matches are expected to belong to ``league``; any match naming a player
    index outside the current roster is ignored. Players left tied on every
    key keep their roster order.
    """

    tallies = [_Tally(player_index=index, name=name) for index, name in enumerate(league.players)]
    for match in matches:
        _apply_match(tallies, match, policy)
    stats = [tally.freeze() for tally in tallies]
    # list.sort is stable, so roster order is the final tie-break.
    stats.sort(key=_ranking_key)
    return stats
