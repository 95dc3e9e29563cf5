"""Load league rosters from CSV exports."""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from pydantic import BaseModel

from podleague.models import League, Player


logger = logging.getLogger(__name__)

DEFAULT_ROSTER_MAPPING = {
    "id": "id",
    "name": "name",
    "faction": "faction",
    "rating": "rating",
    "location": "location",
}


class RosterRow(BaseModel):
    raw_id: Optional[str] = None
    raw_name: str
    raw_faction: Optional[str] = None
    raw_rating: Optional[str] = None
    raw_location: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, str], mapping: Mapping[str, str]) -> "RosterRow":
        def extract(key: str, *, default: Optional[str] = None) -> Optional[str]:
            column = mapping.get(key)
            if column is None:
                return default
            if "|" in column:
                parts = [row.get(col.strip(), "").strip() for col in column.split("|")]
                joined = " ".join(part for part in parts if part)
                return joined or default
            value = row.get(column)
            if value is None:
                return default
            value = value.strip()
            return value or default

        return cls(
            raw_id=extract("id"),
            raw_name=extract("name", default="") or "",
            raw_faction=extract("faction"),
            raw_rating=extract("rating"),
            raw_location=extract("location"),
        )


def _parse_rating(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    digits = re.sub(r"[^0-9-]", "", raw)
    if not digits or digits == "-":
        return None
    try:
        return int(digits)
    except ValueError:
        return None


def _normalize_id(raw: Optional[str]) -> str:
    if not raw:
        return ""
    return raw.strip().lstrip("#")


def rows_to_players(rows: Sequence[RosterRow]) -> List[Player]:
    players: List[Player] = []
    seen: set[str] = set()
    for row in rows:
        player_id = _normalize_id(row.raw_id)
        if not player_id:
            logger.warning("Skipping roster row without an id: %r", row.raw_name)
            continue
        if player_id in seen:
            logger.warning("Duplicate player id %s in roster; keeping first row", player_id)
            continue
        seen.add(player_id)
        players.append(
            Player(
                id=player_id,
                name=row.raw_name or player_id,
                faction=row.raw_faction,
                rating=_parse_rating(row.raw_rating),
                location=row.raw_location,
            )
        )
    return players


def load_roster_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[Player]:
    mapping = mapping or DEFAULT_ROSTER_MAPPING
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        rows = [RosterRow.from_mapping(row, mapping) for row in reader]
    return rows_to_players(rows)


def league_from_csv(
    path: Path,
    *,
    event_id: str,
    name: str = "",
    url: str = "",
    mapping: Mapping[str, str] | None = None,
) -> League:
    players = load_roster_csv(path, mapping=mapping)
    logger.info("Loaded %d players for league %s from %s", len(players), event_id, path)
    return League(event_id=event_id, name=name or event_id, url=url, players=players)
