"""Readable summaries of recorded matches."""

from __future__ import annotations

from typing import Optional

from clubrank.models import League, Match

UNKNOWN_PLAYER = "?"


def _player_name(league: League, index: int) -> str:
    if 0 <= index < len(league.players):
        return league.players[index]
    return UNKNOWN_PLAYER


def describe_match(league: League, match: Match) -> str:
    """Return a one-line summary such as ``"Alice defeated Bob"``."""

    first = _player_name(league, match.player1)
    second = _player_name(league, match.player2)
    winner = match.winner
    if winner.kind == "draw":
        return f"{first} drew with {second}"
    if winner.kind == "forfeit" and winner.player_index in match.participants:
        if winner.player_index == match.player1:
            return f"{first} forfeited against {second}"
        return f"{second} forfeited against {first}"
    if winner.kind == "player" and winner.player_index in match.participants:
        if winner.player_index == match.player1:
            return f"{first} defeated {second}"
        return f"{second} defeated {first}"
    return f"{first} vs {second} (no result)"


def winner_name(league: League, match: Match) -> Optional[str]:
    if match.winner.kind == "player" and match.winner.player_index in match.participants:
        return _player_name(league, match.winner.player_index)
    return None
