"""Pods, matches and the per-period assignment result."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class Match(BaseModel):
    """Unordered pairing of two players with denormalized display names."""

    player1_id: str
    player2_id: str
    player1_name: str = ""
    player2_name: str = ""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _no_self_match(self) -> "Match":
        if self.player1_id == self.player2_id:
            raise ValueError(f"player {self.player1_id!r} cannot be matched against themselves")
        return self

    @property
    def pair_key(self) -> frozenset[str]:
        return frozenset((self.player1_id, self.player2_id))

    def involves(self, player_id: str) -> bool:
        return player_id in (self.player1_id, self.player2_id)

    def opponent_of(self, player_id: str) -> str:
        if player_id == self.player1_id:
            return self.player2_id
        if player_id == self.player2_id:
            return self.player1_id
        raise ValueError(f"player {player_id!r} is not part of this match")

    def __str__(self) -> str:
        return f"{self.player1_name or self.player1_id} vs {self.player2_name or self.player2_id}"


class Pod(BaseModel):
    pod_id: int = Field(default=0, ge=0)
    player_ids: Tuple[str, ...] = ()
    overflow: bool = False
    matches: Tuple[Match, ...] = ()

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _unique_members(self) -> "Pod":
        if len(set(self.player_ids)) != len(self.player_ids):
            raise ValueError(f"pod {self.pod_id} lists a player more than once")
        return self

    @property
    def size(self) -> int:
        return len(self.player_ids)


class ScheduleWarning(BaseModel):
    """An overflow-pod member who could not reach the per-player game target."""

    pod_id: int
    player_id: str
    games: int
    target: int

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return (
            f"Pod {self.pod_id}: player {self.player_id} has {self.games} "
            f"of {self.target} games"
        )


class AssignmentResult(BaseModel):
    event_id: str = ""
    period: str
    target_pod_size: int = Field(..., ge=2)
    generated_at: datetime
    pods: Tuple[Pod, ...] = ()
    warnings: Tuple[ScheduleWarning, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def total_matches(self) -> int:
        return sum(len(pod.matches) for pod in self.pods)

    @property
    def total_players(self) -> int:
        return sum(pod.size for pod in self.pods)

    def pod_for(self, player_id: str) -> Optional[Pod]:
        for pod in self.pods:
            if player_id in pod.player_ids:
                return pod
        return None
