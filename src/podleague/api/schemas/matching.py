from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from podleague.models import AssignmentResult


class GenerateRequest(BaseModel):
    period: str | None = Field(default=None, min_length=1)
    pod_size: int | None = None
    fixed_pods: List[List[str]] | None = None
    seed: int | None = None
    record_history: bool = True


class SwapRequest(BaseModel):
    player1_id: str = Field(..., min_length=1)
    player2_id: str = Field(..., min_length=1)
    seed: int | None = None


class MatchingsResponse(BaseModel):
    result: AssignmentResult
    total_matches: int
    total_players: int

    @classmethod
    def from_result(cls, result: AssignmentResult) -> "MatchingsResponse":
        return cls(
            result=result,
            total_matches=result.total_matches,
            total_players=result.total_players,
        )
