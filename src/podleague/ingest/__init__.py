"""Roster sources that produce League snapshots."""

from .longshanks import extract_event_id, fetch_league, parse_event_page
from .roster import (
    DEFAULT_ROSTER_MAPPING,
    RosterRow,
    league_from_csv,
    load_roster_csv,
    rows_to_players,
)

__all__ = [
    "DEFAULT_ROSTER_MAPPING",
    "RosterRow",
    "extract_event_id",
    "fetch_league",
    "league_from_csv",
    "load_roster_csv",
    "parse_event_page",
    "rows_to_players",
]
