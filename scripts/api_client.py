"""Lightweight REST client for the clubrank API."""

from __future__ import annotations

import argparse
import json
import os
from pathlib import Path

import httpx


def parse_winner(value: str) -> int | str:
    text = value.strip()
    return int(text) if text.isdigit() else text


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the clubrank REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--token", default=os.getenv("CLUBRANK_ADMIN_TOKEN"), help="Admin token for write calls")
    parser.add_argument("--standings", metavar="LEAGUE_ID", nargs="?", const="", help="Print standings (all leagues if no ID)")
    parser.add_argument("--history", action="store_true", help="List recorded matches")
    parser.add_argument("--league", help="League ID filter for --history")
    parser.add_argument(
        "--record",
        nargs=4,
        metavar=("LEAGUE_ID", "PLAYER1", "PLAYER2", "WINNER"),
        help="Record a result; WINNER is a player index, draw, or forfeit-<index>",
    )
    parser.add_argument("--delete-match", metavar="MATCH_ID", help="Delete a recorded match")
    parser.add_argument("--export", metavar="LEAGUE_ID", help="Download standings CSV for a league")
    parser.add_argument("--export-path", type=Path, help="Destination path for exported CSV")
    args = parser.parse_args()

    headers = {"X-Admin-Token": args.token} if args.token else {}

    with httpx.Client(base_url=args.base_url, headers=headers) as client:
        if args.record:
            league_id, player1, player2, winner = args.record
            resp = client.post(
                "/matches",
                json={
                    "league_id": league_id,
                    "player1": int(player1),
                    "player2": int(player2),
                    "winner": parse_winner(winner),
                },
            )
            if resp.status_code == 403:
                raise SystemExit("recording requires a valid admin token")
            resp.raise_for_status()
            print(f"Recorded: {resp.json()['summary']}")
        if args.delete_match:
            resp = client.delete(f"/matches/{args.delete_match}")
            if resp.status_code == 404:
                raise SystemExit(f"match {args.delete_match} not found")
            resp.raise_for_status()
            print(f"Deleted match {args.delete_match}")
        if args.standings is not None:
            path = f"/leagues/{args.standings}/standings" if args.standings else "/standings"
            resp = client.get(path)
            if resp.status_code == 404:
                raise SystemExit(f"league {args.standings} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.history:
            params = {"league_id": args.league} if args.league else None
            resp = client.get("/matches", params=params)
            resp.raise_for_status()
            for match in resp.json():
                print(f"{match['date'][:10]}  {match['league_name'] or match['league_id']}: {match['summary']}")
        if args.export:
            resp = client.get(f"/leagues/{args.export}/standings.csv")
            if resp.status_code == 404:
                raise SystemExit(f"league {args.export} not found")
            resp.raise_for_status()
            if args.export_path:
                args.export_path.write_text(resp.text)
                print(f"CSV export saved to {args.export_path}")
            else:
                print(resp.text)


if __name__ == "__main__":
    main()
