"""Per-player game counts for realized pods."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List

from podleague.models import Pod, ScheduleWarning


def player_game_counts(pod: Pod) -> Dict[str, int]:
    """Return games per member, in member order, including members with none."""

    counts: Counter = Counter()
    for match in pod.matches:
        counts[match.player1_id] += 1
        counts[match.player2_id] += 1
    return {player_id: counts[player_id] for player_id in pod.player_ids}


def find_shortfalls(pod: Pod, target: int) -> List[ScheduleWarning]:
    return [
        ScheduleWarning(pod_id=pod.pod_id, player_id=player_id, games=games, target=target)
        for player_id, games in player_game_counts(pod).items()
        if games < target
    ]
