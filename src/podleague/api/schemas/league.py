from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel


class LeagueSummaryResponse(BaseModel):
    event_id: str
    name: str
    url: str
    player_count: int
    last_updated: datetime


class OpponentResponse(BaseModel):
    player_id: str
    name: str
    times_played: int


class PlayerHistoryResponse(BaseModel):
    player_id: str
    name: str
    opponents: List[OpponentResponse]
