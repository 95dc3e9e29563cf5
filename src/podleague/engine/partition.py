"""Split a roster into pods near a target size, fixed pods first."""

from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional, Sequence

from podleague.exceptions import DuplicateAssignment, FixedPodTooSmall, UnknownPlayer
from podleague.models import Player, Pod


logger = logging.getLogger(__name__)


def validate_fixed_pods(
    players: Sequence[Player],
    fixed_pods: Iterable[Sequence[str]],
) -> List[List[str]]:
    """Check caller-pinned pods against the roster and return them normalized.

    Repeated ids inside one group collapse to a single member; an id shared
    by two groups is rejected.
    """

    known = {player.id for player in players}
    assigned: set[str] = set()
    normalized: List[List[str]] = []
    for group in fixed_pods:
        for player_id in group:
            if player_id not in known:
                raise UnknownPlayer(player_id)
        members = list(dict.fromkeys(group))
        if len(members) < 2:
            raise FixedPodTooSmall(members)
        for player_id in members:
            if player_id in assigned:
                raise DuplicateAssignment(player_id)
            assigned.add(player_id)
        normalized.append(members)
    return normalized


def _split_sizes(count: int, target_size: int) -> tuple[int, int]:
    """Return ``(standard_pods, overflow_pods)`` for ``count`` players."""

    full = count // target_size
    remainder = count % target_size
    standard = full - remainder
    if standard < 0:
        return 0, full
    return standard, remainder


def _fill_pods(ids: Sequence[str], target_size: int) -> List[Pod]:
    count = len(ids)
    if count <= target_size + 1:
        return [Pod(player_ids=tuple(ids), overflow=count > target_size)]

    standard, overflow = _split_sizes(count, target_size)
    groups: List[tuple[List[str], bool]] = []
    index = 0
    for size, is_overflow, how_many in (
        (target_size, False, standard),
        (target_size + 1, True, overflow),
    ):
        for _ in range(how_many):
            groups.append((list(ids[index:index + size]), is_overflow))
            index += size

    if index < count and groups:
        # Leftovers when overflow pods alone cannot absorb the remainder.
        members, _ = groups[-1]
        members.extend(ids[index:])
        groups[-1] = (members, True)

    return [Pod(player_ids=tuple(members), overflow=flag) for members, flag in groups]


def partition_players(
    players: Sequence[Player],
    target_size: int,
    rng: random.Random,
    fixed_pods: Optional[Iterable[Sequence[str]]] = None,
) -> List[Pod]:
    """Return unscheduled pods with ids 1..N, fixed pods leading."""

    pinned = validate_fixed_pods(players, fixed_pods or [])

    pods: List[Pod] = [
        Pod(player_ids=tuple(members), overflow=len(members) > target_size)
        for members in pinned
    ]
    pinned_ids = {player_id for members in pinned for player_id in members}

    remaining = [player.id for player in players if player.id not in pinned_ids]
    if remaining:
        rng.shuffle(remaining)
        pods.extend(_fill_pods(remaining, target_size))

    logger.debug(
        "Partitioned %d players into %d pods (%d fixed)",
        len(players),
        len(pods),
        len(pinned),
    )
    return [
        pod.model_copy(update={"pod_id": index})
        for index, pod in enumerate(pods, start=1)
    ]
