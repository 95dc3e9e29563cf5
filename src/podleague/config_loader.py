"""Persist and load league profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional

from podleague.config.league import LeagueConfiguration


@dataclass
class LeagueProfile:
    pod_size: Optional[int] = None
    months: List[str] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "LeagueProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        pod_size = data.get("pod_size")
        return cls(
            pod_size=int(pod_size) if pod_size is not None else None,
            months=[str(month) for month in data.get("months", [])],
        )

    @classmethod
    def from_configuration(cls, config: LeagueConfiguration) -> "LeagueProfile":
        return cls(pod_size=config.pod_size, months=list(config.months))

    def apply(self, config: LeagueConfiguration) -> LeagueConfiguration:
        updated = config
        if self.pod_size is not None:
            updated = replace(updated, pod_size=self.pod_size)
        if self.months:
            updated = replace(updated, months=tuple(self.months))
        return updated

    def save(self, path: Path) -> None:
        payload = {
            "pod_size": self.pod_size,
            "months": self.months,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
