"""Per-pod match generation: round-robin or history-aware weighted greedy."""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass
from itertools import combinations
from typing import List, Mapping, NamedTuple, Sequence, Tuple

from podleague.models import Match, MatchHistory, Player, Pod, ScheduleWarning


logger = logging.getLogger(__name__)

HISTORY_PENALTY = 1000
MAX_JITTER = 10


class Candidate(NamedTuple):
    player1_id: str
    player2_id: str
    weight: int


@dataclass(frozen=True)
class ScheduledPod:
    pod: Pod
    warnings: Tuple[ScheduleWarning, ...] = ()


def games_target(pod_size: int) -> int:
    """Games each member of an overflow pod of ``pod_size`` should play."""

    return max(pod_size - 2, 1)


def pair_weight(
    player1_id: str,
    player2_id: str,
    history: MatchHistory,
    rng: random.Random,
) -> int:
    """Lower is better: prior meetings dominate, jitter only breaks ties."""

    return history.times_played(player1_id, player2_id) * HISTORY_PENALTY + rng.randrange(MAX_JITTER)


def rank_candidates(
    player_ids: Sequence[str],
    history: MatchHistory,
    rng: random.Random,
) -> List[Candidate]:
    candidates = [
        Candidate(p1, p2, pair_weight(p1, p2, history, rng))
        for p1, p2 in combinations(player_ids, 2)
    ]
    # sorted() is stable, so equal weights keep member order.
    return sorted(candidates, key=lambda candidate: candidate.weight)


def _make_match(player1_id: str, player2_id: str, lookup: Mapping[str, Player]) -> Match:
    def label(player_id: str) -> str:
        player = lookup.get(player_id)
        return player.display_name if player is not None else player_id

    return Match(
        player1_id=player1_id,
        player2_id=player2_id,
        player1_name=label(player1_id),
        player2_name=label(player2_id),
    )


def round_robin(player_ids: Sequence[str], lookup: Mapping[str, Player]) -> List[Match]:
    return [_make_match(p1, p2, lookup) for p1, p2 in combinations(player_ids, 2)]


def _greedy_pass(
    ranked: Sequence[Candidate],
    counts: Counter,
    target: int,
) -> List[Candidate]:
    accepted: List[Candidate] = []
    for candidate in ranked:
        p1, p2 = candidate.player1_id, candidate.player2_id
        if counts[p1] < target and counts[p2] < target:
            accepted.append(candidate)
            counts[p1] += 1
            counts[p2] += 1
    return accepted


def _repair_pass(
    ranked: Sequence[Candidate],
    accepted: List[Candidate],
    counts: Counter,
    player_ids: Sequence[str],
    target: int,
) -> None:
    chosen = {frozenset((c.player1_id, c.player2_id)) for c in accepted}
    for candidate in ranked:
        if all(counts[player_id] >= target for player_id in player_ids):
            return
        p1, p2 = candidate.player1_id, candidate.player2_id
        if counts[p1] >= target and counts[p2] >= target:
            continue
        key = frozenset((p1, p2))
        if key in chosen:
            continue
        accepted.append(candidate)
        chosen.add(key)
        counts[p1] += 1
        counts[p2] += 1


def weighted_matches(
    player_ids: Sequence[str],
    history: MatchHistory,
    lookup: Mapping[str, Player],
    rng: random.Random,
) -> tuple[List[Match], Counter]:
    """Partial round-robin for an overflow pod.

    The greedy pass accepts the most novel pairs while both players are
    under target. The repair pass then tops up anyone left short, allowing
    one side to exceed target but never repeating an accepted pair.
    """

    target = games_target(len(player_ids))
    ranked = rank_candidates(player_ids, history, rng)
    counts: Counter = Counter({player_id: 0 for player_id in player_ids})

    accepted = _greedy_pass(ranked, counts, target)
    if any(counts[player_id] < target for player_id in player_ids):
        _repair_pass(ranked, accepted, counts, player_ids, target)

    matches = [_make_match(c.player1_id, c.player2_id, lookup) for c in accepted]
    return matches, counts


def schedule_pod(
    pod: Pod,
    history: MatchHistory,
    lookup: Mapping[str, Player],
    rng: random.Random,
) -> ScheduledPod:
    """Return ``pod`` with its matches filled in, plus any shortfall warnings."""

    if not pod.overflow:
        return ScheduledPod(pod=pod.model_copy(update={"matches": tuple(round_robin(pod.player_ids, lookup))}))

    matches, counts = weighted_matches(pod.player_ids, history, lookup, rng)
    target = games_target(pod.size)
    warnings = tuple(
        ScheduleWarning(pod_id=pod.pod_id, player_id=player_id, games=counts[player_id], target=target)
        for player_id in pod.player_ids
        if counts[player_id] < target
    )
    if warnings:
        logger.warning(
            "Pod %d: %d player(s) have fewer than %d games due to constraints",
            pod.pod_id,
            len(warnings),
            target,
        )
    return ScheduledPod(pod=pod.model_copy(update={"matches": tuple(matches)}), warnings=warnings)
