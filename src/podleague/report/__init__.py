"""Summaries and exports for generated matchings."""

from .export import export_matchings_to_csv
from .summary import find_shortfalls, player_game_counts

__all__ = [
    "export_matchings_to_csv",
    "find_shortfalls",
    "player_game_counts",
]
