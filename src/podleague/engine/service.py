"""Assignment orchestration: generate a period's pods, swap players, fold history."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Sequence

from podleague.engine.partition import partition_players
from podleague.engine.scheduler import schedule_pod
from podleague.exceptions import (
    InsufficientPlayers,
    InvalidPodSize,
    PlayerNotFound,
    SamePod,
)
from podleague.models import (
    AssignmentResult,
    League,
    MatchHistory,
    Player,
    Pod,
    ScheduleWarning,
)


logger = logging.getLogger(__name__)


def _make_rng(seed: Optional[int]) -> random.Random:
    return random.Random(seed) if seed is not None else random.Random()


def generate_matchings(
    league: League,
    target_pod_size: int,
    history: MatchHistory,
    period: str,
    fixed_pods: Optional[Iterable[Sequence[str]]] = None,
    seed: Optional[int] = None,
    *,
    now: Optional[datetime] = None,
) -> AssignmentResult:
    """Partition ``league`` into pods and schedule every pod's matches.

    The same league, history, size, period, fixed pods and seed always give
    the same pods and matches. ``history`` is only read.
    """

    if target_pod_size < 2:
        raise InvalidPodSize(target_pod_size)
    if len(league.players) < 2:
        raise InsufficientPlayers(len(league.players))

    rng = _make_rng(seed)
    lookup = league.player_lookup()
    pods = partition_players(league.players, target_pod_size, rng, fixed_pods)

    scheduled: List[Pod] = []
    warnings: List[ScheduleWarning] = []
    for pod in pods:
        if pod.size < 2:
            logger.warning("Pod %d has a single player and no matches", pod.pod_id)
        outcome = schedule_pod(pod, history, lookup, rng)
        scheduled.append(outcome.pod)
        warnings.extend(outcome.warnings)

    result = AssignmentResult(
        event_id=league.event_id,
        period=period,
        target_pod_size=target_pod_size,
        generated_at=now or datetime.now(timezone.utc),
        pods=tuple(scheduled),
        warnings=tuple(warnings),
    )
    logger.info(
        "Generated %d pods with %d matches for %s (%s)",
        len(result.pods),
        result.total_matches,
        league.event_id or "league",
        period,
    )
    return result


def _locate(result: AssignmentResult, player_id: str) -> int:
    for index, pod in enumerate(result.pods):
        if player_id in pod.player_ids:
            return index
    raise PlayerNotFound(player_id)


def _replace_member(pod: Pod, old: str, new: str, target_pod_size: int) -> Pod:
    members = tuple(new if player_id == old else player_id for player_id in pod.player_ids)
    return Pod(
        pod_id=pod.pod_id,
        player_ids=members,
        overflow=len(members) > target_pod_size,
    )


def swap_players(
    result: AssignmentResult,
    player_a: str,
    player_b: str,
    lookup: Mapping[str, Player] | League,
    history: MatchHistory,
    seed: Optional[int] = None,
) -> AssignmentResult:
    """Return a copy of ``result`` with two players exchanged between pods.

    Only the two affected pods are re-scheduled; every other pod and its
    warnings are carried over unchanged.
    """

    index_a = _locate(result, player_a)
    index_b = _locate(result, player_b)
    if index_a == index_b:
        raise SamePod(player_a, player_b, result.pods[index_a].pod_id)

    if isinstance(lookup, League):
        lookup = lookup.player_lookup()

    rng = _make_rng(seed)
    pods = list(result.pods)
    pods[index_a] = _replace_member(pods[index_a], player_a, player_b, result.target_pod_size)
    pods[index_b] = _replace_member(pods[index_b], player_b, player_a, result.target_pod_size)

    affected = {pods[index_a].pod_id, pods[index_b].pod_id}
    warnings = [warning for warning in result.warnings if warning.pod_id not in affected]
    for index in (index_a, index_b):
        outcome = schedule_pod(pods[index], history, lookup, rng)
        pods[index] = outcome.pod
        warnings.extend(outcome.warnings)

    logger.info(
        "Swapped %s (now pod %d) and %s (now pod %d)",
        player_a,
        pods[index_b].pod_id,
        player_b,
        pods[index_a].pod_id,
    )
    return result.model_copy(update={"pods": tuple(pods), "warnings": tuple(warnings)})


def record_matchings(history: MatchHistory, result: AssignmentResult) -> MatchHistory:
    """Return a new ledger with ``result``'s matches appended.

    A pairing already recorded for ``result.period`` is not added again.
    """

    updated = MatchHistory(event_id=history.event_id or result.event_id, pairings=list(history.pairings))
    added = 0
    for pod in result.pods:
        for match in pod.matches:
            if updated.has_pairing_in(match.player1_id, match.player2_id, result.period):
                continue
            updated.add_pairing(match.player1_id, match.player2_id, result.period)
            added += 1
    logger.debug("Recorded %d new pairings for %s", added, result.period)
    return updated
