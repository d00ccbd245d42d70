"""REST API for the club ranking service."""

from __future__ import annotations

import logging
import os
import secrets
from pathlib import Path
from typing import Callable, Optional, TypeVar

from fastapi import FastAPI, Header, HTTPException, Query
from fastapi.responses import Response

from clubrank.api.schemas import (
    LeagueCreateRequest,
    LeagueResponse,
    LeagueUpdateRequest,
    MatchDateUpdate,
    MatchRequest,
    MatchResponse,
    SettingsResponse,
    SettingsUpdateRequest,
    StandingRow,
    StandingsResponse,
)
from clubrank.config.leagues import ADMIN_TOKEN_ENV
from clubrank.models import League, Match, PlayerStat, Settings
from clubrank.persistence import LeagueStore, PermissionDeniedError
from clubrank.standings import describe_match, export_standings_to_csv, winner_name
from clubrank.standings.live import LiveStandings

logger = logging.getLogger("uvicorn.error")

PODIUM_RANKS = 3

T = TypeVar("T")


def league_to_response(league: League) -> LeagueResponse:
    return LeagueResponse(league_id=league.league_id, name=league.name, players=list(league.players))


def settings_to_response(settings: Settings) -> SettingsResponse:
    return SettingsResponse(
        players_per_group=settings.players_per_group,
        scoring_policy=settings.scoring_policy,
    )


def match_to_response(match: Match, league: League | None) -> MatchResponse:
    return MatchResponse(
        match_id=match.match_id,
        league_id=match.league_id,
        league_name=league.name if league else None,
        player1=match.player1,
        player2=match.player2,
        winner=match.winner.encode(),
        outcome=match.winner.kind,
        winner_name=winner_name(league, match) if league else None,
        summary=describe_match(league, match) if league else "",
        date=match.date,
    )


def standings_to_response(league: League, table: list[PlayerStat], policy: str) -> StandingsResponse:
    rows = [
        StandingRow(
            rank=rank,
            player_index=stat.player_index,
            name=stat.name,
            played=stat.played,
            wins=stat.wins,
            draws=stat.draws,
            losses=stat.losses,
            forfeits=stat.forfeits,
            points=stat.points,
            win_rate=round(stat.win_rate, 4),
            podium=rank <= PODIUM_RANKS,
        )
        for rank, stat in enumerate(table, start=1)
    ]
    return StandingsResponse(
        league_id=league.league_id,
        league_name=league.name,
        scoring_policy=policy,
        rows=rows,
    )


def _guard(action: Callable[[], T], *, not_found: str = "Not found") -> T:
    """Run a store call, translating store errors into HTTP errors."""

    try:
        return action()
    except PermissionDeniedError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=not_found) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def create_app(
    store: LeagueStore | None = None,
    *,
    admin_token: Optional[str] = None,
) -> FastAPI:
    app = FastAPI(title="clubrank")
    if store is None:
        store = LeagueStore.from_env(Path(__file__).resolve().parent.parent / "clubrank.sqlite")
    token = admin_token if admin_token is not None else os.getenv(ADMIN_TOKEN_ENV)
    if not token:
        logger.warning("%s is not set; admin endpoints will reject every request", ADMIN_TOKEN_ENV)
    live = LiveStandings(store)
    app.state.league_store = store
    app.state.live_standings = live

    def is_admin(supplied: str | None) -> bool:
        if not token or not supplied:
            return False
        return secrets.compare_digest(supplied, token)

    def _fetch_league_or_404(league_id: str) -> League:
        return _guard(lambda: store.get_league(league_id), not_found="League not found")

    def _standings(league_id: str) -> StandingsResponse:
        league = _fetch_league_or_404(league_id)
        table = live.standings(league_id)
        return standings_to_response(league, table, store.get_settings().scoring_policy)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/leagues", response_model=list[LeagueResponse])
    async def list_leagues():
        return [league_to_response(league) for league in store.list_leagues()]

    @app.post("/leagues", response_model=LeagueResponse, status_code=201)
    async def create_league(
        payload: LeagueCreateRequest,
        x_admin_token: str | None = Header(default=None),
    ):
        league = _guard(
            lambda: store.create_league(payload.name, payload.players, admin=is_admin(x_admin_token))
        )
        return league_to_response(league)

    @app.get("/leagues/{league_id}", response_model=LeagueResponse)
    async def get_league(league_id: str):
        return league_to_response(_fetch_league_or_404(league_id))

    @app.put("/leagues/{league_id}", response_model=LeagueResponse)
    async def update_league(
        league_id: str,
        payload: LeagueUpdateRequest,
        x_admin_token: str | None = Header(default=None),
    ):
        league = _guard(
            lambda: store.update_league(
                league_id,
                admin=is_admin(x_admin_token),
                name=payload.name,
                players=payload.players,
            ),
            not_found="League not found",
        )
        return league_to_response(league)

    @app.delete("/leagues/{league_id}", status_code=204)
    async def delete_league(league_id: str, x_admin_token: str | None = Header(default=None)):
        _guard(
            lambda: store.delete_league(league_id, admin=is_admin(x_admin_token)),
            not_found="League not found",
        )
        return Response(status_code=204)

    @app.get("/standings", response_model=list[StandingsResponse])
    async def all_standings():
        return [_standings(league.league_id) for league in store.list_leagues()]

    @app.get("/leagues/{league_id}/standings", response_model=StandingsResponse)
    async def league_standings(league_id: str):
        return _standings(league_id)

    @app.get("/leagues/{league_id}/standings.csv")
    async def export_standings(league_id: str):
        _fetch_league_or_404(league_id)
        table = live.standings(league_id)
        return Response(
            content=export_standings_to_csv(table),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={league_id}-standings.csv"},
        )

    @app.get("/matches", response_model=list[MatchResponse])
    async def list_matches(league_id: str | None = Query(default=None), limit: int | None = Query(default=None, ge=1)):
        if league_id is not None:
            _fetch_league_or_404(league_id)
        leagues = {league.league_id: league for league in store.list_leagues()}
        matches = store.get_matches(league_id)
        if limit is not None:
            matches = matches[:limit]
        return [match_to_response(match, leagues.get(match.league_id)) for match in matches]

    @app.post("/matches", response_model=MatchResponse, status_code=201)
    async def record_match(payload: MatchRequest, x_admin_token: str | None = Header(default=None)):
        match = _guard(
            lambda: store.record_match(
                payload.league_id,
                payload.player1,
                payload.player2,
                payload.winner,
                admin=is_admin(x_admin_token),
                date=payload.date,
            ),
            not_found="League not found",
        )
        return match_to_response(match, store.get_league(match.league_id))

    @app.get("/matches/{match_id}", response_model=MatchResponse)
    async def get_match(match_id: str):
        match = _guard(lambda: store.get_match(match_id), not_found="Match not found")
        league = _guard(lambda: store.get_league(match.league_id), not_found="League not found")
        return match_to_response(match, league)

    @app.patch("/matches/{match_id}", response_model=MatchResponse)
    async def update_match_date(
        match_id: str,
        payload: MatchDateUpdate,
        x_admin_token: str | None = Header(default=None),
    ):
        match = _guard(
            lambda: store.update_match_date(match_id, payload.date, admin=is_admin(x_admin_token)),
            not_found="Match not found",
        )
        league = _guard(lambda: store.get_league(match.league_id), not_found="League not found")
        return match_to_response(match, league)

    @app.delete("/matches/{match_id}", status_code=204)
    async def delete_match(match_id: str, x_admin_token: str | None = Header(default=None)):
        _guard(
            lambda: store.delete_match(match_id, admin=is_admin(x_admin_token)),
            not_found="Match not found",
        )
        return Response(status_code=204)

    @app.get("/settings", response_model=SettingsResponse)
    async def get_settings():
        return settings_to_response(store.get_settings())

    @app.put("/settings", response_model=SettingsResponse)
    async def update_settings(payload: SettingsUpdateRequest, x_admin_token: str | None = Header(default=None)):
        settings = _guard(
            lambda: store.update_settings(
                admin=is_admin(x_admin_token),
                players_per_group=payload.players_per_group,
                scoring_policy=payload.scoring_policy,
            )
        )
        return settings_to_response(settings)

    @app.post("/reset", response_model=list[LeagueResponse])
    async def reset(x_admin_token: str | None = Header(default=None)):
        leagues = _guard(lambda: store.reset(admin=is_admin(x_admin_token)))
        return [league_to_response(league) for league in leagues]

    return app


__all__ = ["create_app"]
