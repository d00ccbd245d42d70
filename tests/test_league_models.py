from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from clubrank.models import League, Match, PlayerStat, Winner


def test_league_is_frozen():
    league = League(league_id="league-0", name="Lord of the Rings", players=("Frodo", "Sam"))

    assert league.players == ("Frodo", "Sam")

    with pytest.raises((TypeError, ValidationError)):
        league.name = "Other"  # type: ignore[misc]


def test_league_requires_identifier():
    with pytest.raises(ValidationError):
        League(league_id="", name="Empty", players=("A",))


@pytest.mark.parametrize(
    "raw, kind, index",
    [
        (1, "player", 1),
        ("0", "player", 0),
        ("draw", "draw", None),
        ("DRAW", "draw", None),
        ("forfeit-2", "forfeit", 2),
        ("forfeit-x", "unknown", None),
        (None, "unknown", None),
        (True, "unknown", None),
        ([1, 2], "unknown", None),
    ],
)
def test_winner_decode(raw, kind, index):
    winner = Winner.decode(raw)
    assert winner.kind == kind
    assert winner.player_index == index


def test_winner_encode_matches_stored_format():
    assert Winner.player(3).encode() == 3
    assert Winner.draw().encode() == "draw"
    assert Winner.forfeit(1).encode() == "forfeit-1"
    assert Winner.decode("mystery").encode() == "mystery"


def test_match_participants():
    match = Match(
        match_id="m1",
        league_id="league-0",
        player1=0,
        player2=2,
        winner=Winner.draw(),
        date=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )
    assert match.participants == (0, 2)


def test_player_stat_win_rate_handles_zero_played():
    assert PlayerStat(player_index=0, name="Idle").win_rate == 0.0
    assert PlayerStat(player_index=0, name="Busy", played=4, wins=1).win_rate == pytest.approx(0.25)
