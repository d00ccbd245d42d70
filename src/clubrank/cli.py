"""Command-line interface for managing leagues and printing standings."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from clubrank.config.leagues import DB_PATH_ENV, LeagueSeed
from clubrank.config.scoring import get_policy
from clubrank.config_loader import LeagueProfile
from clubrank.models import League
from clubrank.persistence import LeagueStore
from clubrank.standings import (
    compute_standings,
    describe_match,
    export_history_to_csv,
    export_standings_to_csv,
)

DEFAULT_DB = Path("clubrank.sqlite")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Club ranking: record results and print league standings")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help=f"SQLite database path (default: ${DB_PATH_ENV} or {DEFAULT_DB})",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    standings = sub.add_parser("standings", help="Print standings for one or all leagues")
    standings.add_argument("--league", help="League ID (default: all leagues)")

    history = sub.add_parser("history", help="List recorded matches, newest first")
    history.add_argument("--league", help="League ID filter")
    history.add_argument("--limit", type=int, default=None, help="Maximum matches to show")

    record = sub.add_parser("record", help="Record a match result")
    record.add_argument("league", help="League ID")
    record.add_argument("player1", type=int, help="Index of the first player")
    record.add_argument("player2", type=int, help="Index of the second player")
    record.add_argument(
        "winner",
        help="Winning player index, 'draw', or 'forfeit-<index>' naming the player who forfeited",
    )
    record.add_argument("--date", type=datetime.fromisoformat, default=None, help="ISO timestamp of the match")

    delete = sub.add_parser("delete-match", help="Delete a recorded match")
    delete.add_argument("match_id")

    set_date = sub.add_parser("set-date", help="Correct the date of a recorded match")
    set_date.add_argument("match_id")
    set_date.add_argument("date", type=datetime.fromisoformat, help="ISO timestamp")

    rename = sub.add_parser("rename", help="Rename a league and/or its players")
    rename.add_argument("league", help="League ID")
    rename.add_argument("--name", default=None, help="New league name")
    rename.add_argument(
        "--player",
        action="append",
        default=[],
        help="Player rename as index=name (repeatable)",
    )

    group = sub.add_parser("players-per-group", help="Resize every league roster")
    group.add_argument("size", type=int, help="Players per league (2-10)")

    scoring = sub.add_parser("scoring", help="Select the scoring policy")
    scoring.add_argument("policy", help="Policy name, e.g. standard or classic")

    reset = sub.add_parser("reset", help="Delete all matches and restore default leagues")
    reset.add_argument("--profile", type=Path, default=None, help="League profile JSON to seed from")
    reset.add_argument("--save-profile", type=Path, default=None, help="Write the current leagues to a profile JSON")
    reset.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    export = sub.add_parser("export", help="Write standings or history as CSV")
    export.add_argument("league", help="League ID")
    export.add_argument("--history", action="store_true", help="Export match history instead of standings")
    export.add_argument("--output", type=Path, default=None, help="Output CSV path (default: stdout)")

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def _parse_renames(entries: list[str]) -> dict[int, str]:
    renames: dict[int, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid player entry '{entry}', expected index=name")
        key, value = entry.split("=", 1)
        renames[int(key.strip())] = value.strip()
    return renames


def _print_standings(store: LeagueStore, league: League) -> None:
    policy = get_policy(store.get_settings().scoring_policy)
    table = compute_standings(league, store.get_matches(league.league_id), policy)
    print(f"{league.name} [{league.league_id}]")
    print(f"{'#':>2}  {'Player':<20} {'P':>3} {'W':>3} {'D':>3} {'L':>3} {'F':>3} {'Pts':>4}")
    for rank, stat in enumerate(table, start=1):
        print(
            f"{rank:>2}  {stat.name:<20} {stat.played:>3} {stat.wins:>3} {stat.draws:>3} "
            f"{stat.losses:>3} {stat.forfeits:>3} {stat.points:>4}"
        )


def _run(args: argparse.Namespace, store: LeagueStore) -> int:
    # The command line acts as a local administrator.
    admin = True

    if args.command == "standings":
        leagues = [store.get_league(args.league)] if args.league else store.list_leagues()
        for position, league in enumerate(leagues):
            if position:
                print()
            _print_standings(store, league)
    elif args.command == "history":
        leagues = {league.league_id: league for league in store.list_leagues()}
        matches = store.get_matches(args.league)
        if args.limit is not None:
            matches = matches[: max(0, args.limit)]
        if not matches:
            print("No matches recorded yet.")
        for match in matches:
            league = leagues.get(match.league_id)
            summary = describe_match(league, match) if league else "(league removed)"
            league_name = league.name if league else match.league_id
            print(f"{match.date:%Y-%m-%d}  {league_name:<20} {summary}  [{match.match_id}]")
    elif args.command == "record":
        match = store.record_match(
            args.league,
            args.player1,
            args.player2,
            args.winner,
            admin=admin,
            date=args.date,
        )
        print(f"Recorded: {describe_match(store.get_league(match.league_id), match)} [{match.match_id}]")
    elif args.command == "delete-match":
        store.delete_match(args.match_id, admin=admin)
        print(f"Deleted match {args.match_id}")
    elif args.command == "set-date":
        match = store.update_match_date(args.match_id, args.date, admin=admin)
        print(f"Match {match.match_id} now dated {match.date.isoformat()}")
    elif args.command == "rename":
        league = store.get_league(args.league)
        renames = _parse_renames(args.player)
        players = None
        if renames:
            players = [renames.get(index, name) for index, name in enumerate(league.players)]
        updated = store.update_league(args.league, admin=admin, name=args.name, players=players)
        print(f"{updated.name}: {', '.join(updated.players)}")
    elif args.command == "players-per-group":
        settings = store.set_players_per_group(args.size, admin=admin)
        print(f"Players per group set to {settings.players_per_group}")
    elif args.command == "scoring":
        settings = store.set_scoring_policy(args.policy, admin=admin)
        print(f"Scoring policy set to {settings.scoring_policy}")
    elif args.command == "reset":
        if args.save_profile:
            seeds = [LeagueSeed(name=league.name, players=league.players) for league in store.list_leagues()]
            LeagueProfile(seeds).save(args.save_profile)
            print(f"Saved league profile to {args.save_profile}")
        if not args.yes:
            answer = input("This will delete ALL match history and reset player names. Continue? [y/N] ")
            if answer.strip().lower() not in {"y", "yes"}:
                print("Aborted.")
                return 1
        seeds = LeagueProfile.load(args.profile).leagues if args.profile else None
        leagues = store.reset(admin=admin, leagues=seeds)
        print(f"All data has been reset ({len(leagues)} leagues).")
    elif args.command == "export":
        league = store.get_league(args.league)
        if args.history:
            text = export_history_to_csv(league, store.get_matches(league.league_id))
        else:
            policy = get_policy(store.get_settings().scoring_policy)
            text = export_standings_to_csv(compute_standings(league, store.get_matches(league.league_id), policy))
        if args.output:
            args.output.write_text(text, encoding="utf-8")
            print(f"Wrote {args.output}")
        else:
            sys.stdout.write(text)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        import uvicorn

        from clubrank.api import create_app

        store = LeagueStore(args.db) if args.db else LeagueStore.from_env(DEFAULT_DB)
        uvicorn.run(create_app(store), host=args.host, port=args.port)
        return 0

    store = LeagueStore(args.db) if args.db else LeagueStore.from_env(DEFAULT_DB)
    try:
        return _run(args, store)
    except KeyError as exc:
        print(f"Error: {exc.args[0]}", file=sys.stderr)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
