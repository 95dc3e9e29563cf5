from __future__ import annotations

import pytest

from podleague.config import DB_PATH_ENV, POD_SIZE_ENV
from podleague.models import League, MatchHistory, Player
from podleague.persistence import LeagueStore


def build_league(count: int, event_id: str = "test-event") -> League:
    return League(
        event_id=event_id,
        name="Test League",
        url=f"https://longshanks.org/event/{event_id}/",
        players=[Player(id=str(i), name=f"Player {i}") for i in range(1, count + 1)],
    )


def build_history(*pairs: tuple[str, str, str], event_id: str = "test-event") -> MatchHistory:
    history = MatchHistory(event_id=event_id)
    for player1_id, player2_id, period in pairs:
        history.add_pairing(player1_id, player2_id, period)
    return history


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv(DB_PATH_ENV, raising=False)
    monkeypatch.delenv(POD_SIZE_ENV, raising=False)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store(tmp_path) -> LeagueStore:
    return LeagueStore(tmp_path / "podleague.sqlite")
