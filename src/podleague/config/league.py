"""League scheduling configuration with profile and environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Optional, Tuple

from podleague.exceptions import InvalidPodSize


logger = logging.getLogger(__name__)

POD_SIZE_ENV = "PODLEAGUE_POD_SIZE"
DB_PATH_ENV = "PODLEAGUE_DB_PATH"


@dataclass(frozen=True)
class LeagueConfiguration:
    pod_size: int = 3
    months: Tuple[str, ...] = ("February", "March", "April")

    def validate(self) -> None:
        if self.pod_size < 2:
            raise InvalidPodSize(self.pod_size)
        if not self.months:
            raise ValueError("At least one month must be specified")

    def next_month(self, generated: Iterable[str]) -> Optional[str]:
        """First configured month with no generated matchings, if any."""

        done = {period.strip().lower() for period in generated}
        for month in self.months:
            if month.strip().lower() not in done:
                return month
        return None


DEFAULT_CONFIGURATION = LeagueConfiguration()


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("%s=%d is below %d; using default %d", name, value, min_value, default)
        return default
    return value


def load_configuration(profile_path: Optional[Path] = None) -> LeagueConfiguration:
    """Resolve defaults, then a JSON profile, then environment overrides."""

    from podleague.config_loader import LeagueProfile

    config = DEFAULT_CONFIGURATION
    if profile_path is not None and profile_path.exists():
        config = LeagueProfile.load(profile_path).apply(config)
    config = replace(config, pod_size=_env_int(POD_SIZE_ENV, config.pod_size, min_value=2))
    config.validate()
    return config
