"""Pydantic models for API I/O."""

from .league import LeagueSummaryResponse, PlayerHistoryResponse, OpponentResponse
from .matching import GenerateRequest, SwapRequest, MatchingsResponse

__all__ = [
    "GenerateRequest",
    "LeagueSummaryResponse",
    "MatchingsResponse",
    "OpponentResponse",
    "PlayerHistoryResponse",
    "SwapRequest",
]
