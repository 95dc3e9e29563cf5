"""Errors raised by the pod assignment engine and its collaborators."""

from __future__ import annotations

from typing import Iterable


class PodLeagueError(Exception):
    """Base exception for all podleague errors."""


class AssignmentError(PodLeagueError, ValueError):
    """Caller input rejected before any pods were built."""


class InvalidPodSize(AssignmentError):
    def __init__(self, pod_size: int):
        super().__init__(f"Pod size must be at least 2, got {pod_size}")
        self.pod_size = pod_size


class InsufficientPlayers(AssignmentError):
    def __init__(self, player_count: int):
        super().__init__(f"At least 2 players are required, got {player_count}")
        self.player_count = player_count


class UnknownPlayer(AssignmentError):
    def __init__(self, player_id: str, message: str | None = None):
        super().__init__(message or f"Player {player_id!r} not found in roster")
        self.player_id = player_id


class PlayerNotFound(UnknownPlayer):
    """Raised by swaps when an id is not a member of any pod."""

    def __init__(self, player_id: str):
        super().__init__(player_id, f"Player {player_id!r} not found in any pod")


class DuplicateAssignment(AssignmentError):
    def __init__(self, player_id: str):
        super().__init__(f"Player {player_id!r} appears in multiple fixed pods")
        self.player_id = player_id


class FixedPodTooSmall(AssignmentError):
    def __init__(self, members: Iterable[str]):
        self.members = tuple(members)
        super().__init__(
            f"Fixed pods must contain at least 2 players, got {list(self.members)}"
        )


class SamePod(AssignmentError):
    def __init__(self, player_a: str, player_b: str, pod_id: int):
        super().__init__(
            f"Players {player_a!r} and {player_b!r} are both in pod {pod_id}; nothing to swap"
        )
        self.player_a = player_a
        self.player_b = player_b
        self.pod_id = pod_id


class RosterFetchError(PodLeagueError, RuntimeError):
    """Raised when the roster source could not be read after retries."""


class LeagueNotFound(PodLeagueError, KeyError):
    def __init__(self, event_id: str):
        super().__init__(event_id)
        self.event_id = event_id

    def __str__(self) -> str:
        return f"League {self.event_id} not found"


class MatchingsNotFound(PodLeagueError, KeyError):
    def __init__(self, event_id: str, period: str):
        super().__init__(event_id, period)
        self.event_id = event_id
        self.period = period

    def __str__(self) -> str:
        return f"No matchings found for league {self.event_id} in {self.period}"


__all__ = [
    "AssignmentError",
    "DuplicateAssignment",
    "FixedPodTooSmall",
    "InsufficientPlayers",
    "InvalidPodSize",
    "LeagueNotFound",
    "MatchingsNotFound",
    "PlayerNotFound",
    "PodLeagueError",
    "RosterFetchError",
    "SamePod",
    "UnknownPlayer",
]
