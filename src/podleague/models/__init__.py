"""Canonical league, pod and history models."""

from .history import HistoricalPairing, MatchHistory
from .matching import AssignmentResult, Match, Pod, ScheduleWarning
from .player import League, Player

__all__ = [
    "AssignmentResult",
    "HistoricalPairing",
    "League",
    "Match",
    "MatchHistory",
    "Player",
    "Pod",
    "ScheduleWarning",
]
