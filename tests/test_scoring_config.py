import pytest

from clubrank.config import (
    default_leagues,
    get_policy,
    iter_policies,
    league_id_for,
    resize_roster,
    validate_players_per_group,
)
from clubrank.config.leagues import env_scoring_policy


def test_get_policy_is_case_insensitive():
    policy = get_policy("Standard")
    assert (policy.win, policy.draw, policy.loss, policy.forfeit) == (3, 1, 0, -1)


def test_classic_policy_scores_wins_only():
    policy = get_policy("classic")
    assert (policy.win, policy.draw, policy.forfeit) == (1, 0, 0)


def test_get_policy_missing_raises():
    with pytest.raises(KeyError):
        get_policy("elo")


def test_iter_policies_lists_both():
    assert {policy.name for policy in iter_policies()} == {"standard", "classic"}


def test_default_leagues_number_players_across_groups():
    seeds = default_leagues(5)
    assert [seed.name for seed in seeds] == ["Lord of the Rings", "League B", "League C", "League D"]
    assert seeds[0].players == ("Player 1", "Player 2", "Player 3", "Player 4", "Player 5")
    assert seeds[3].players[-1] == "Player 20"
    assert league_id_for(2) == "league-2"


def test_resize_roster_truncates_and_pads():
    assert resize_roster(("A", "B", "C"), 2) == ("A", "B")
    assert resize_roster(("A", "B"), 4, offset=8) == ("A", "B", "Player 11", "Player 12")


@pytest.mark.parametrize("value", [1, 11, True, "4"])
def test_validate_players_per_group_rejects(value):
    with pytest.raises(ValueError):
        validate_players_per_group(value)


def test_validate_players_per_group_accepts_bounds():
    assert validate_players_per_group(2) == 2
    assert validate_players_per_group(10) == 10


def test_env_scoring_policy_falls_back_on_unknown(monkeypatch, caplog):
    monkeypatch.setenv("CLUBRANK_SCORING", "elo")
    with caplog.at_level("WARNING"):
        assert env_scoring_policy("standard") == "standard"
    assert "elo" in caplog.text

    monkeypatch.setenv("CLUBRANK_SCORING", "Classic")
    assert env_scoring_policy("standard") == "classic"
