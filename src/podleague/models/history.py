"""Append-only ledger of pairings that have already been played."""

from __future__ import annotations

from typing import List, Set

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


def _same_period(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()


class HistoricalPairing(BaseModel):
    player1_id: str
    player2_id: str
    period: str

    model_config = ConfigDict(frozen=True)

    def involves(self, player_id: str) -> bool:
        return player_id in (self.player1_id, self.player2_id)

    def is_pairing(self, id1: str, id2: str) -> bool:
        return (self.player1_id == id1 and self.player2_id == id2) or (
            self.player1_id == id2 and self.player2_id == id1
        )


class MatchHistory(BaseModel):
    """
    Record of previous pairings for one event.

    Every pair query is symmetric; ``(a, b)`` and ``(b, a)`` name the same
    pairing. The ledger appends unconditionally, so callers folding a period
    back in are responsible for skipping pairings already recorded for it.
    """

    event_id: str = ""
    pairings: List[HistoricalPairing] = Field(default_factory=list)

    def have_played(self, player1_id: str, player2_id: str) -> bool:
        return any(p.is_pairing(player1_id, player2_id) for p in self.pairings)

    def times_played(self, player1_id: str, player2_id: str) -> int:
        return sum(1 for p in self.pairings if p.is_pairing(player1_id, player2_id))

    def has_pairing_in(self, player1_id: str, player2_id: str, period: str) -> bool:
        return any(
            p.period == period and p.is_pairing(player1_id, player2_id) for p in self.pairings
        )

    def previous_opponents(self, player_id: str) -> Set[str]:
        opponents: Set[str] = set()
        for pairing in self.pairings:
            if pairing.player1_id == player_id:
                opponents.add(pairing.player2_id)
            elif pairing.player2_id == player_id:
                opponents.add(pairing.player1_id)
        return opponents

    def add_pairing(self, player1_id: str, player2_id: str, period: str) -> None:
        self.pairings.append(
            HistoricalPairing(player1_id=player1_id, player2_id=player2_id, period=period)
        )

    def periods(self) -> List[str]:
        return list(dict.fromkeys(p.period for p in self.pairings))

    def has_period(self, period: str) -> bool:
        return any(_same_period(p.period, period) for p in self.pairings)

    def without_period(self, period: str) -> "MatchHistory":
        """Return a copy without ``period``; period labels compare case-insensitively."""

        return MatchHistory(
            event_id=self.event_id,
            pairings=[p for p in self.pairings if not _same_period(p.period, period)],
        )
