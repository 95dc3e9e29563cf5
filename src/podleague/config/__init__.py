"""Configuration helpers for league scheduling defaults."""

from .league import (
    DB_PATH_ENV,
    DEFAULT_CONFIGURATION,
    POD_SIZE_ENV,
    LeagueConfiguration,
    load_configuration,
)

__all__ = [
    "DB_PATH_ENV",
    "DEFAULT_CONFIGURATION",
    "POD_SIZE_ENV",
    "LeagueConfiguration",
    "load_configuration",
]
