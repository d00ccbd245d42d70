"""Keep computed standings in step with store changes."""

from __future__ import annotations

import logging
from typing import Dict, List

from clubrank.config.scoring import get_policy
from clubrank.models import PlayerStat
from clubrank.persistence import LeagueStore, StoreEvent

from .service import compute_standings

logger = logging.getLogger("uvicorn.error")


class LiveStandings:
    """Cache of standings per league, recomputed when the data changes.

    In-process writes arrive as store events. Writes from other store
    instances or processes are caught by comparing the store revision
    before each read.
    """

    def __init__(self, store: LeagueStore):
        self._store = store
        self._tables: Dict[str, List[PlayerStat]] = {}
        self._revision = store.revision()
        self._unsubscribe = store.subscribe(self._on_change)

    def close(self) -> None:
        self._unsubscribe()
        self._tables.clear()

    def _on_change(self, event: StoreEvent) -> None:
        revision = self._store.revision()
        # Each store write bumps the revision once; any larger jump means
        # another writer touched the database too.
        if event.kind in {"reset", "settings_updated"} or revision != self._revision + 1:
            self._tables.clear()
        self._revision = revision
        for league_id in event.league_ids:
            self._tables.pop(league_id, None)
            try:
                self._recompute(league_id)
            except KeyError:
                continue
        logger.debug("Standings recomputed after %s for %s", event.kind, ", ".join(event.league_ids))

    def _sync(self) -> None:
        revision = self._store.revision()
        if revision != self._revision:
            logger.debug("Store revision moved from %d to %d; dropping cached standings", self._revision, revision)
            self._tables.clear()
            self._revision = revision

    def _recompute(self, league_id: str) -> List[PlayerStat]:
        league = self._store.get_league(league_id)
        policy = get_policy(self._store.get_settings().scoring_policy)
        table = compute_standings(league, self._store.get_matches(league_id), policy)
        self._tables[league_id] = table
        return table

    def standings(self, league_id: str) -> List[PlayerStat]:
        """Return the ranked table for ``league_id``, raising KeyError if it does not exist."""

        self._sync()
        cached = self._tables.get(league_id)
        if cached is None:
            cached = self._recompute(league_id)
        return list(cached)

    def all_standings(self) -> Dict[str, List[PlayerStat]]:
        return {league.league_id: self.standings(league.league_id) for league in self._store.list_leagues()}
