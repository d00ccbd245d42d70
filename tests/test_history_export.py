import csv
from datetime import datetime, timezone
from io import StringIO

from clubrank.models import League, Match, Winner
from clubrank.standings import (
    compute_standings,
    describe_match,
    export_history_to_csv,
    export_standings_to_csv,
    winner_name,
)

LEAGUE = League(league_id="league-0", name="Lord of the Rings", players=("Alice", "Bob", "Carol"))


def _match(player1: int, player2: int, winner: Winner, match_id: str = "m1") -> Match:
    return Match(
        match_id=match_id,
        league_id=LEAGUE.league_id,
        player1=player1,
        player2=player2,
        winner=winner,
        date=datetime(2024, 2, 14, 19, 0, tzinfo=timezone.utc),
    )


def test_describe_match_outcomes():
    assert describe_match(LEAGUE, _match(0, 1, Winner.player(0))) == "Alice defeated Bob"
    assert describe_match(LEAGUE, _match(0, 1, Winner.player(1))) == "Bob defeated Alice"
    assert describe_match(LEAGUE, _match(1, 2, Winner.draw())) == "Bob drew with Carol"
    assert describe_match(LEAGUE, _match(2, 0, Winner.forfeit(2))) == "Carol forfeited against Alice"
    assert describe_match(LEAGUE, _match(2, 0, Winner.forfeit(0))) == "Alice forfeited against Carol"


def test_describe_match_tolerates_stale_players():
    assert describe_match(LEAGUE, _match(0, 7, Winner.player(7))) == "? defeated Alice"
    assert describe_match(LEAGUE, _match(0, 1, Winner.decode("bye"))) == "Alice vs Bob (no result)"


def test_winner_name_only_for_decisive_results():
    assert winner_name(LEAGUE, _match(0, 1, Winner.player(1))) == "Bob"
    assert winner_name(LEAGUE, _match(0, 1, Winner.draw())) is None
    assert winner_name(LEAGUE, _match(0, 1, Winner.forfeit(0))) is None


def test_export_standings_rows_follow_rank():
    matches = [_match(0, 1, Winner.player(1), "m1"), _match(1, 2, Winner.draw(), "m2")]
    text = export_standings_to_csv(compute_standings(LEAGUE, matches))
    rows = list(csv.reader(StringIO(text)))

    assert rows[0] == ["rank", "player", "played", "wins", "draws", "losses", "forfeits", "points"]
    assert rows[1] == ["1", "Bob", "2", "1", "1", "0", "0", "4"]
    assert rows[2] == ["2", "Carol", "1", "0", "1", "0", "0", "1"]
    assert rows[3] == ["3", "Alice", "1", "0", "0", "1", "0", "0"]


def test_export_history_lists_summaries():
    text = export_history_to_csv(LEAGUE, [_match(2, 0, Winner.forfeit(2), "m9")])
    rows = list(csv.reader(StringIO(text)))

    assert rows[0] == ["match_id", "date", "league", "result"]
    assert rows[1] == ["m9", "2024-02-14T19:00:00+00:00", "Lord of the Rings", "Carol forfeited against Alice"]
