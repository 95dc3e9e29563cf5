"""Pod partitioning, match scheduling and assignment orchestration."""

from .partition import partition_players, validate_fixed_pods
from .scheduler import (
    HISTORY_PENALTY,
    MAX_JITTER,
    Candidate,
    ScheduledPod,
    games_target,
    pair_weight,
    rank_candidates,
    schedule_pod,
)
from .service import generate_matchings, record_matchings, swap_players

__all__ = [
    "HISTORY_PENALTY",
    "MAX_JITTER",
    "Candidate",
    "ScheduledPod",
    "games_target",
    "generate_matchings",
    "pair_weight",
    "partition_players",
    "rank_candidates",
    "record_matchings",
    "schedule_pod",
    "swap_players",
    "validate_fixed_pods",
]
