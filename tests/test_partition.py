import random

import pytest

from podleague.engine import partition_players, validate_fixed_pods
from podleague.exceptions import DuplicateAssignment, FixedPodTooSmall, UnknownPlayer

from .conftest import build_league


def _sizes(pods):
    return [(pod.size, pod.overflow) for pod in pods]


def _all_ids(pods):
    return [player_id for pod in pods for player_id in pod.player_ids]


@pytest.mark.parametrize(
    "count,target,expected",
    [
        (9, 3, [(3, False), (3, False), (3, False)]),
        (14, 3, [(3, False), (3, False), (4, True), (4, True)]),
        (7, 3, [(3, False), (4, True)]),
        (4, 3, [(4, True)]),
        (2, 3, [(2, False)]),
        (3, 3, [(3, False)]),
        (5, 2, [(2, False), (3, True)]),
        (8, 5, [(8, True)]),
        (11, 4, [(5, True), (6, True)]),
    ],
)
def test_partition_sizes(count, target, expected):
    league = build_league(count)

    pods = partition_players(league.players, target, random.Random(1))

    assert _sizes(pods) == expected
    assert sorted(_all_ids(pods), key=int) == [p.id for p in league.players]
    assert [pod.pod_id for pod in pods] == list(range(1, len(pods) + 1))
    assert all(pod.matches == () for pod in pods)


def test_partition_is_reproducible_with_same_rng_seed():
    league = build_league(12)

    first = partition_players(league.players, 3, random.Random(99))
    second = partition_players(league.players, 3, random.Random(99))

    assert [pod.player_ids for pod in first] == [pod.player_ids for pod in second]


def test_fixed_pods_lead_in_order():
    league = build_league(9)

    pods = partition_players(
        league.players,
        3,
        random.Random(5),
        fixed_pods=[["1", "2", "3"], ["4", "5"]],
    )

    assert pods[0].player_ids == ("1", "2", "3")
    assert pods[1].player_ids == ("4", "5")
    assert not pods[1].overflow
    assert pods[0].pod_id == 1 and pods[1].pod_id == 2
    assert sorted(_all_ids(pods), key=int) == [p.id for p in league.players]


def test_oversized_fixed_pod_is_overflow():
    league = build_league(10)

    pods = partition_players(league.players, 3, random.Random(5), fixed_pods=[["1", "2", "3", "4"]])

    assert pods[0].player_ids == ("1", "2", "3", "4")
    assert pods[0].overflow
    assert _sizes(pods[1:]) == [(3, False), (3, False)]


def test_all_players_fixed_skips_distribution():
    league = build_league(6)

    pods = partition_players(
        league.players,
        3,
        random.Random(5),
        fixed_pods=[["1", "2", "3"], ["4", "5", "6"]],
    )

    assert len(pods) == 2


def test_unknown_fixed_player_rejected():
    league = build_league(5)

    with pytest.raises(UnknownPlayer, match="999") as excinfo:
        validate_fixed_pods(league.players, [["1", "999"]])
    assert excinfo.value.player_id == "999"


def test_player_in_multiple_fixed_pods_rejected():
    league = build_league(6)

    with pytest.raises(DuplicateAssignment, match="multiple") as excinfo:
        validate_fixed_pods(league.players, [["1", "2", "3"], ["3", "4", "5"]])
    assert excinfo.value.player_id == "3"


@pytest.mark.parametrize("group", [["1"], ["1", "1"], []])
def test_fixed_pod_needs_two_distinct_players(group):
    league = build_league(5)

    with pytest.raises(FixedPodTooSmall, match="at least 2"):
        validate_fixed_pods(league.players, [group])


def test_fixed_pod_repeated_id_collapses():
    league = build_league(5)

    assert validate_fixed_pods(league.players, [["1", "2", "1"]]) == [["1", "2"]]
