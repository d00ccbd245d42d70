"""Persistence layer for leagues, match results and club settings."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple
from uuid import uuid4

from clubrank.config.leagues import (
    DB_PATH_ENV,
    LeagueSeed,
    default_leagues,
    env_players_per_group,
    env_scoring_policy,
    league_id_for,
    resize_roster,
    validate_players_per_group,
)
from clubrank.config.scoring import DEFAULT_POLICY, get_policy
from clubrank.models import League, Match, Settings, Winner

logger = logging.getLogger(__name__)


class PermissionDeniedError(PermissionError):
    """Raised when a write is attempted without the admin capability."""


@dataclass(frozen=True)
class StoreEvent:
    kind: str
    league_ids: Tuple[str, ...] = ()


Listener = Callable[[StoreEvent], None]


def _require_admin(admin: bool, action: str) -> None:
    if not admin:
        raise PermissionDeniedError(f"Admin capability required to {action}")


def _clean_name(value: Optional[str], fallback: str) -> str:
    if value is None:
        return fallback
    stripped = value.strip()
    return stripped or fallback


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class LeagueStore:
    """SQLite-backed store owning leagues, matches and settings.

    Reads need no capability. Every write takes ``admin`` and raises
    :class:`PermissionDeniedError` when it is false.
    """

    def __init__(self, db_path: Path | str, *, seed: bool = True):
        self._use_uri = False
        self._listeners: list[Listener] = []
        if isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path: Path | str = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()
        if seed:
            self._seed_if_empty()

    @classmethod
    def from_env(cls, default_path: Path | str) -> "LeagueStore":
        env_db = os.getenv(DB_PATH_ENV)
        return cls(env_db or default_path)

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                conn = sqlite3.connect(self.db_path)
            except sqlite3.OperationalError:
                fallback_dir = Path(tempfile.gettempdir()) / "clubrank-runtime"
                fallback_dir.mkdir(parents=True, exist_ok=True)
                fallback = fallback_dir / "clubrank.sqlite"
                logger.warning("Unable to open %s; falling back to %s", self.db_path, fallback)
                conn = sqlite3.connect(fallback)
                self.db_path = fallback
                self._create_schema(conn)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS leagues (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                players_json TEXT NOT NULL,
                position INTEGER NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS matches (
                id TEXT PRIMARY KEY,
                league_id TEXT NOT NULL,
                player1 INTEGER NOT NULL,
                player2 INTEGER NOT NULL,
                winner_json TEXT NOT NULL,
                date TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value_json TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS meta (
                key TEXT PRIMARY KEY,
                value INTEGER NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS matches_league ON matches (league_id)")
        conn.commit()

    def _seed_if_empty(self) -> None:
        with self._connect() as conn:
            count = conn.execute("SELECT COUNT(*) FROM leagues").fetchone()[0]
            if count:
                return
            settings = self._read_settings(conn)
            seeds = default_leagues(settings.players_per_group)
            self._write_seeds(conn, seeds)
            self._bump_revision(conn)
            conn.commit()
        logger.info("Seeded %d default leagues", len(seeds))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for change events and return an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, kind: str, league_ids: Iterable[str]) -> None:
        event = StoreEvent(kind=kind, league_ids=tuple(dict.fromkeys(league_ids)))
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.warning("Store listener failed for %s", kind, exc_info=True)

    def get_league(self, league_id: str) -> League:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM leagues WHERE id = ?", (league_id,)).fetchone()
        if row is None:
            raise KeyError(f"League {league_id} not found")
        return self._row_to_league(row)

    def list_leagues(self) -> List[League]:
        with self._connect() as conn:
            return self._read_leagues(conn)

    def get_matches(self, league_id: Optional[str] = None) -> List[Match]:
        """Return matches newest first, optionally restricted to one league."""

        query = "SELECT * FROM matches"
        params: tuple[Any, ...] = ()
        if league_id is not None:
            query += " WHERE league_id = ?"
            params = (league_id,)
        query += " ORDER BY date DESC, rowid DESC"
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_match(row) for row in rows]

    def get_match(self, match_id: str) -> Match:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM matches WHERE id = ?", (match_id,)).fetchone()
        if row is None:
            raise KeyError(f"Match {match_id} not found")
        return self._row_to_match(row)

    def get_settings(self) -> Settings:
        with self._connect() as conn:
            return self._read_settings(conn)

    def revision(self) -> int:
        """Return a counter that every committed write to this database increments.

        Unlike :meth:`subscribe`, this also sees writes made by other store
        instances or processes sharing the same file.
        """

        with self._connect() as conn:
            row = conn.execute("SELECT value FROM meta WHERE key = 'revision'").fetchone()
        return row["value"] if row else 0

    def create_league(self, name: str, players: Sequence[str], *, admin: bool) -> League:
        _require_admin(admin, "create a league")
        clean_name = _clean_name(name, "")
        if not clean_name:
            raise ValueError("League name must not be empty")
        roster = [_clean_name(player, "") for player in players]
        if not roster or any(not player for player in roster):
            raise ValueError("League needs at least one named player")
        league_id = uuid4().hex
        with self._connect() as conn:
            position = conn.execute("SELECT COALESCE(MAX(position), -1) + 1 FROM leagues").fetchone()[0]
            conn.execute(
                "INSERT INTO leagues (id, name, players_json, position) VALUES (?, ?, ?, ?)",
                (league_id, clean_name, json.dumps(roster), position),
            )
            self._bump_revision(conn)
            conn.commit()
        logger.info("Created league %s (%s)", league_id, clean_name)
        self._notify("league_created", [league_id])
        return self.get_league(league_id)

    def update_league(
        self,
        league_id: str,
        *,
        admin: bool,
        name: Optional[str] = None,
        players: Optional[Sequence[Optional[str]]] = None,
    ) -> League:
        """Rename a league and/or its players.

        Blank entries keep the current value. A longer or shorter ``players``
        list resizes the roster; matches that point past the new end stay
        stored and are ignored by standings.
        """

        _require_admin(admin, "edit a league")
        league = self.get_league(league_id)
        updated_name = _clean_name(name, league.name)
        updated_players = list(league.players)
        if players is not None:
            resized: list[str] = []
            for index, player in enumerate(players):
                fallback = league.players[index] if index < len(league.players) else ""
                value = _clean_name(player, fallback)
                if not value:
                    raise ValueError(f"Player {index + 1} needs a name")
                resized.append(value)
            if not resized:
                raise ValueError("League needs at least one named player")
            updated_players = resized
        with self._connect() as conn:
            conn.execute(
                "UPDATE leagues SET name = ?, players_json = ? WHERE id = ?",
                (updated_name, json.dumps(updated_players), league_id),
            )
            self._bump_revision(conn)
            conn.commit()
        self._notify("league_updated", [league_id])
        return self.get_league(league_id)

    def delete_league(self, league_id: str, *, admin: bool) -> None:
        _require_admin(admin, "delete a league")
        with self._connect() as conn:
            deleted = conn.execute("DELETE FROM leagues WHERE id = ?", (league_id,)).rowcount
            if not deleted:
                raise KeyError(f"League {league_id} not found")
            conn.execute("DELETE FROM matches WHERE league_id = ?", (league_id,))
            self._bump_revision(conn)
            conn.commit()
        logger.info("Deleted league %s and its matches", league_id)
        self._notify("league_deleted", [league_id])

    def record_match(
        self,
        league_id: str,
        player1: int,
        player2: int,
        winner: Winner | int | str,
        *,
        admin: bool,
        date: Optional[datetime] = None,
    ) -> Match:
        _require_admin(admin, "record a result")
        league = self.get_league(league_id)
        size = len(league.players)
        for label, index in (("player1", player1), ("player2", player2)):
            if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < size:
                raise ValueError(f"{label} must be a player index between 0 and {size - 1}")
        if player1 == player2:
            raise ValueError("A player cannot play against themselves")
        decoded = winner if isinstance(winner, Winner) else Winner.decode(winner)
        if decoded.kind == "unknown" or (
            decoded.kind in {"player", "forfeit"} and decoded.player_index not in (player1, player2)
        ):
            raise ValueError(f"Winner {winner!r} is not a valid outcome for this match")

        match_id = uuid4().hex
        played_at = _as_utc(date or datetime.now(timezone.utc))
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO matches (id, league_id, player1, player2, winner_json, date)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    match_id,
                    league_id,
                    player1,
                    player2,
                    json.dumps(decoded.encode()),
                    played_at.isoformat(timespec="microseconds"),
                ),
            )
            self._bump_revision(conn)
            conn.commit()
        logger.info(
            "Recorded match %s in %s: %s vs %s -> %s",
            match_id,
            league_id,
            league.players[player1],
            league.players[player2],
            decoded.encode(),
        )
        self._notify("match_recorded", [league_id])
        return self.get_match(match_id)

    def delete_match(self, match_id: str, *, admin: bool) -> None:
        _require_admin(admin, "delete a result")
        match = self.get_match(match_id)
        with self._connect() as conn:
            conn.execute("DELETE FROM matches WHERE id = ?", (match_id,))
            self._bump_revision(conn)
            conn.commit()
        logger.info("Deleted match %s", match_id)
        self._notify("match_deleted", [match.league_id])

    def update_match_date(self, match_id: str, date: datetime, *, admin: bool) -> Match:
        _require_admin(admin, "edit a match date")
        match = self.get_match(match_id)
        with self._connect() as conn:
            conn.execute(
                "UPDATE matches SET date = ? WHERE id = ?",
                (_as_utc(date).isoformat(timespec="microseconds"), match_id),
            )
            self._bump_revision(conn)
            conn.commit()
        self._notify("match_redated", [match.league_id])
        return self.get_match(match_id)

    def reset(self, *, admin: bool, leagues: Optional[Sequence[LeagueSeed]] = None) -> List[League]:
        """Delete every match and restore the default leagues in one transaction."""

        _require_admin(admin, "reset club data")
        with self._connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            previous = [league.league_id for league in self._read_leagues(conn)]
            settings = self._read_settings(conn)
            seeds = list(leagues) if leagues is not None else default_leagues(settings.players_per_group)
            conn.execute("DELETE FROM matches")
            conn.execute("DELETE FROM leagues")
            self._write_seeds(conn, seeds)
            self._bump_revision(conn)
            conn.commit()
        current = self.list_leagues()
        logger.info("Reset club data to %d leagues", len(current))
        self._notify("reset", previous + [league.league_id for league in current])
        return current

    def update_settings(
        self,
        *,
        admin: bool,
        players_per_group: Optional[int] = None,
        scoring_policy: Optional[str] = None,
    ) -> Settings:
        """Apply any given settings in one transaction.

        A new group size resizes every league roster in the same transaction.
        """

        _require_admin(admin, "change settings")
        size = validate_players_per_group(players_per_group) if players_per_group is not None else None
        policy_name = None
        if scoring_policy is not None:
            try:
                policy_name = get_policy(scoring_policy).name
            except KeyError as exc:
                raise ValueError(str(exc.args[0])) from exc

        with self._connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            leagues = self._read_leagues(conn)
            if policy_name is not None:
                self._write_setting(conn, "scoring_policy", policy_name)
            if size is not None:
                self._write_setting(conn, "players_per_group", size)
                for position, league in enumerate(leagues):
                    roster = resize_roster(league.players, size, offset=position * size)
                    conn.execute(
                        "UPDATE leagues SET players_json = ? WHERE id = ?",
                        (json.dumps(list(roster)), league.league_id),
                    )
            self._bump_revision(conn)
            conn.commit()
        if size is not None:
            logger.info("Players per group set to %d across %d leagues", size, len(leagues))
        if policy_name is not None:
            logger.info("Scoring policy set to %s", policy_name)
        self._notify("settings_updated", [league.league_id for league in leagues])
        return self.get_settings()

    def set_players_per_group(self, players_per_group: int, *, admin: bool) -> Settings:
        _require_admin(admin, "change players per group")
        return self.update_settings(admin=admin, players_per_group=players_per_group)

    def set_scoring_policy(self, name: str, *, admin: bool) -> Settings:
        _require_admin(admin, "change the scoring policy")
        return self.update_settings(admin=admin, scoring_policy=name)

    def _read_leagues(self, conn: sqlite3.Connection) -> List[League]:
        rows = conn.execute("SELECT * FROM leagues ORDER BY position, id").fetchall()
        return [self._row_to_league(row) for row in rows]

    def _bump_revision(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            INSERT INTO meta (key, value) VALUES ('revision', 1)
            ON CONFLICT(key) DO UPDATE SET value = value + 1
            """
        )


    def _write_seeds(self, conn: sqlite3.Connection, seeds: Sequence[LeagueSeed]) -> None:
        for position, seed in enumerate(seeds):
            conn.execute(
                "INSERT INTO leagues (id, name, players_json, position) VALUES (?, ?, ?, ?)",
                (league_id_for(position), seed.name, json.dumps(list(seed.players)), position),
            )

    def _write_setting(self, conn: sqlite3.Connection, key: str, value: Any) -> None:
        conn.execute(
            """
            INSERT INTO settings (key, value_json) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value_json = excluded.value_json
            """,
            (key, json.dumps(value)),
        )

    def _read_settings(self, conn: sqlite3.Connection) -> Settings:
        rows = conn.execute("SELECT key, value_json FROM settings").fetchall()
        stored = {row["key"]: json.loads(row["value_json"]) for row in rows}
        policy = stored.get("scoring_policy")
        if policy is None:
            policy = env_scoring_policy(DEFAULT_POLICY)
        else:
            try:
                policy = get_policy(policy).name
            except KeyError:
                logger.warning("Stored scoring policy %r is unknown; using %s", policy, DEFAULT_POLICY)
                policy = DEFAULT_POLICY
        return Settings(
            players_per_group=stored.get("players_per_group", env_players_per_group()),
            scoring_policy=policy,
        )

    def _row_to_league(self, row: sqlite3.Row) -> League:
        return League(
            league_id=row["id"],
            name=row["name"],
            players=tuple(json.loads(row["players_json"])),
        )

    def _row_to_match(self, row: sqlite3.Row) -> Match:
        return Match(
            match_id=row["id"],
            league_id=row["league_id"],
            player1=row["player1"],
            player2=row["player2"],
            winner=Winner.decode(json.loads(row["winner_json"])),
            date=datetime.fromisoformat(row["date"]),
        )


__all__ = [
    "LeagueStore",
    "Listener",
    "PermissionDeniedError",
    "StoreEvent",
]
