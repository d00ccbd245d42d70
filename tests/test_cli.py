import json

import pytest

from clubrank.cli import main
from clubrank.persistence import LeagueStore


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    monkeypatch.delenv("CLUBRANK_DB_PATH", raising=False)
    monkeypatch.delenv("CLUBRANK_PLAYERS_PER_GROUP", raising=False)
    monkeypatch.delenv("CLUBRANK_SCORING", raising=False)
    return tmp_path / "cli.sqlite"


def test_record_and_print_standings(db_path, capsys):
    assert main(["--db", str(db_path), "record", "league-0", "0", "1", "1"]) == 0
    assert "Recorded: Player 2 defeated Player 1" in capsys.readouterr().out

    assert main(["--db", str(db_path), "standings", "--league", "league-0"]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0] == "Lord of the Rings [league-0]"
    assert lines[2].split()[:2] == ["1", "Player"]
    assert "Player 2" in lines[2]
    assert lines[2].split()[-1] == "3"


def test_history_and_delete(db_path, capsys):
    main(["--db", str(db_path), "record", "league-1", "2", "3", "draw"])
    capsys.readouterr()
    match_id = LeagueStore(db_path).get_matches()[0].match_id

    assert main(["--db", str(db_path), "history"]) == 0
    assert "Player 8 drew with Player 9" in capsys.readouterr().out

    assert main(["--db", str(db_path), "delete-match", match_id]) == 0
    capsys.readouterr()
    main(["--db", str(db_path), "history"])
    assert "No matches recorded yet." in capsys.readouterr().out


def test_invalid_record_reports_error(db_path, capsys):
    assert main(["--db", str(db_path), "record", "league-0", "0", "0", "0"]) == 2
    assert "Error:" in capsys.readouterr().err
    assert main(["--db", str(db_path), "standings", "--league", "missing"]) == 2


def test_rename_and_reset_with_profile(db_path, tmp_path, capsys):
    assert main(["--db", str(db_path), "rename", "league-0", "--name", "Masters", "--player", "0=Magnus"]) == 0
    assert "Masters: Magnus, Player 2" in capsys.readouterr().out

    profile = tmp_path / "profile.json"
    profile.write_text(json.dumps({"leagues": [{"name": "Solo", "players": ["A", "B"]}]}), encoding="utf-8")
    assert main(["--db", str(db_path), "reset", "--yes", "--profile", str(profile)]) == 0

    leagues = LeagueStore(db_path).list_leagues()
    assert [(league.name, league.players) for league in leagues] == [("Solo", ("A", "B"))]


def test_export_standings_to_file(db_path, tmp_path, capsys):
    main(["--db", str(db_path), "record", "league-0", "0", "1", "forfeit-1"])
    output = tmp_path / "standings.csv"

    assert main(["--db", str(db_path), "export", "league-0", "--output", str(output)]) == 0

    rows = output.read_text(encoding="utf-8").splitlines()
    assert rows[0] == "rank,player,played,wins,draws,losses,forfeits,points"
    assert rows[-1] == "5,Player 2,1,0,0,1,1,-1"
