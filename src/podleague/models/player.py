"""Player and league roster models shared by ingest, engine and storage."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class Player(BaseModel):
    """Registered league player. ``id`` is the only identity used for matching."""

    id: str = Field(..., min_length=1)
    name: str
    faction: Optional[str] = None
    rating: Optional[int] = None
    location: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def display_name(self) -> str:
        return f"{self.name} #{self.id}"

    def __str__(self) -> str:
        return self.display_name


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class League(BaseModel):
    """Roster snapshot for one event."""

    event_id: str = Field(..., min_length=1)
    name: str = ""
    url: str = ""
    players: List[Player] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _unique_player_ids(self) -> "League":
        seen: set[str] = set()
        for player in self.players:
            if player.id in seen:
                raise ValueError(f"duplicate player id {player.id!r} in league {self.event_id}")
            seen.add(player.id)
        return self

    def player_lookup(self) -> Dict[str, Player]:
        return {player.id: player for player in self.players}

    def find_player(self, query: str) -> Optional[Player]:
        """Resolve a player by id, falling back to a case-insensitive name match."""

        lookup = self.player_lookup()
        if query in lookup:
            return lookup[query]
        lowered = query.strip().lower()
        for player in self.players:
            if player.name.lower() == lowered:
                return player
        return None
