"""REST API for league pod assignment."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response

from podleague.api.schemas import (
    GenerateRequest,
    LeagueSummaryResponse,
    MatchingsResponse,
    OpponentResponse,
    PlayerHistoryResponse,
    SwapRequest,
)
from podleague.config import LeagueConfiguration, load_configuration
from podleague.engine import generate_matchings, swap_players
from podleague.exceptions import AssignmentError
from podleague.models import AssignmentResult, League, MatchHistory
from podleague.persistence import LeagueStore
from podleague.report import export_matchings_to_csv


DEFAULT_DB_PATH = Path.cwd() / "data" / "podleague.sqlite"


def _league_summary(league: League) -> LeagueSummaryResponse:
    return LeagueSummaryResponse(
        event_id=league.event_id,
        name=league.name,
        url=league.url,
        player_count=len(league.players),
        last_updated=league.last_updated,
    )


def _player_history(league: League, history: MatchHistory, player_id: str) -> PlayerHistoryResponse:
    lookup = league.player_lookup()
    player = lookup.get(player_id)
    opponents = [
        OpponentResponse(
            player_id=opponent_id,
            name=lookup[opponent_id].display_name if opponent_id in lookup else opponent_id,
            times_played=history.times_played(player_id, opponent_id),
        )
        for opponent_id in sorted(history.previous_opponents(player_id))
    ]
    return PlayerHistoryResponse(
        player_id=player_id,
        name=player.display_name if player else player_id,
        opponents=opponents,
    )


def create_app(
    store: Optional[LeagueStore] = None,
    config: Optional[LeagueConfiguration] = None,
) -> FastAPI:
    app = FastAPI(title="podleague")
    store = store or LeagueStore(DEFAULT_DB_PATH)
    config = config or load_configuration()
    app.state.league_store = store
    app.state.config = config

    def _league_or_404(event_id: str) -> League:
        league = store.get_league(event_id)
        if league is None:
            raise HTTPException(status_code=404, detail=f"League {event_id} not found")
        return league

    def _matchings_or_404(event_id: str, period: str) -> AssignmentResult:
        result = store.get_matchings(event_id, period)
        if result is None:
            raise HTTPException(status_code=404, detail=f"No matchings found for {period}")
        return result

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/leagues", response_model=list[LeagueSummaryResponse])
    async def list_leagues():
        return [_league_summary(league) for league in store.list_leagues()]

    @app.post("/leagues", response_model=LeagueSummaryResponse)
    async def save_league(league: League):
        store.save_league(league)
        return _league_summary(league)

    @app.get("/leagues/{event_id}", response_model=League)
    async def get_league(event_id: str):
        return _league_or_404(event_id)

    @app.post("/leagues/{event_id}/matchings", response_model=MatchingsResponse)
    async def generate(event_id: str, request: GenerateRequest):
        league = _league_or_404(event_id)
        stored_history = store.load_history(event_id)
        pod_size = request.pod_size if request.pod_size is not None else config.pod_size
        period = request.period or config.next_month(r.period for r in store.list_matchings(event_id))
        if period is None:
            raise HTTPException(status_code=400, detail="All configured months already have matchings")
        try:
            result = generate_matchings(
                league,
                pod_size,
                stored_history.without_period(period),
                period,
                fixed_pods=request.fixed_pods,
                seed=request.seed,
            )
        except AssignmentError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        store.save_matchings(result)
        if request.record_history:
            store.replace_period(event_id, result)
        return MatchingsResponse.from_result(result)

    @app.get("/leagues/{event_id}/matchings/{period}", response_model=MatchingsResponse)
    async def get_matchings(event_id: str, period: str):
        return MatchingsResponse.from_result(_matchings_or_404(event_id, period))

    @app.post("/leagues/{event_id}/matchings/{period}/swap", response_model=MatchingsResponse)
    async def swap(event_id: str, period: str, request: SwapRequest):
        league = _league_or_404(event_id)
        current = _matchings_or_404(event_id, period)
        stored_history = store.load_history(event_id)
        history = stored_history.without_period(current.period)
        try:
            updated = swap_players(
                current,
                request.player1_id,
                request.player2_id,
                league,
                history,
                seed=request.seed,
            )
        except AssignmentError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        store.save_matchings(updated)
        if stored_history.has_period(current.period):
            store.replace_period(event_id, updated)
        return MatchingsResponse.from_result(updated)

    @app.get("/leagues/{event_id}/matchings/{period}/export.csv")
    async def export_csv(event_id: str, period: str):
        league = store.get_league(event_id)
        result = _matchings_or_404(event_id, period)
        csv_text = export_matchings_to_csv(
            result,
            lookup=league.player_lookup() if league else None,
        )
        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={event_id}-{period.lower()}.csv"},
        )

    @app.get("/leagues/{event_id}/history")
    async def get_history(event_id: str, player_id: str | None = Query(default=None)) -> Any:
        league = _league_or_404(event_id)
        history = store.load_history(event_id)
        if player_id:
            return _player_history(league, history, player_id)
        return {
            "event_id": event_id,
            "total_pairings": len(history.pairings),
            "periods": {
                period: [
                    pairing.model_dump()
                    for pairing in history.pairings
                    if pairing.period == period
                ]
                for period in history.periods()
            },
        }

    return app


__all__ = ["create_app"]
