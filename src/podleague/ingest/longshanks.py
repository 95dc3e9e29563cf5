"""Fetch league rosters from Longshanks event pages."""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional

import httpx
from bs4 import BeautifulSoup, Tag

from podleague.exceptions import RosterFetchError
from podleague.models import League, Player


logger = logging.getLogger(__name__)

MAX_RETRIES = 3
BASE_DELAY_SECONDS = 1.0
REQUEST_TIMEOUT_SECONDS = 30.0

_EVENT_ID_PATTERN = re.compile(r"/event/(\d+)")
_PLAYER_ID_PATTERN = re.compile(r"#(\d+)")
_FACTION_KEYWORDS = ("Republic", "Empire", "Rebel", "Separatist", "Confederacy")


def extract_event_id(url: str) -> Optional[str]:
    match = _EVENT_ID_PATTERN.search(url)
    return match.group(1) if match else None


def _is_faction(alt: str) -> bool:
    return any(keyword in alt for keyword in _FACTION_KEYWORDS)


def _text(tag: Optional[Tag]) -> str:
    if tag is None:
        return ""
    return " ".join(tag.get_text(" ", strip=True).split())


def _is_community(block: Tag) -> bool:
    return "community" in block.get("class", []) or block.select_one(".community") is not None


def _find_faction(block: Tag) -> Optional[str]:
    # Faction icons sit in the row that wraps the player block.
    row = block.parent if block.parent is not None else block
    for img in row.select("img[alt]"):
        alt = img.get("alt", "").strip()
        if alt and _is_faction(alt):
            return alt
    return None


def parse_event_page(html: str, *, event_id: str, url: str = "") -> League:
    soup = BeautifulSoup(html, "html.parser")

    players: List[Player] = []
    seen: set[str] = set()
    for block in soup.select(".player_disp"):
        if _is_community(block):
            continue
        id_match = _PLAYER_ID_PATTERN.search(_text(block.select_one(".id_number")))
        if not id_match:
            continue
        player_id = id_match.group(1)
        if player_id in seen:
            continue
        name = _text(block.select_one(".nickname")) or _text(block.select_one(".player_link"))
        if not name:
            continue
        seen.add(player_id)
        players.append(Player(id=player_id, name=name, faction=_find_faction(block)))

    return League(
        event_id=event_id,
        name=_text(soup.select_one("h1")) or "Unknown League",
        url=url,
        players=players,
        last_updated=datetime.now(timezone.utc),
    )


def fetch_league(
    url: str,
    *,
    client: Optional[httpx.Client] = None,
    max_retries: int = MAX_RETRIES,
    base_delay: float = BASE_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> League:
    """Download and parse an event page, retrying with exponential backoff."""

    event_id = extract_event_id(url)
    if not event_id:
        raise ValueError(f"Could not extract event ID from URL: {url}")

    owns_client = client is None
    http = client or httpx.Client(follow_redirects=True, timeout=REQUEST_TIMEOUT_SECONDS)
    last_error: Optional[Exception] = None
    try:
        for attempt in range(1, max_retries + 1):
            try:
                resp = http.get(url)
                resp.raise_for_status()
                league = parse_event_page(resp.text, event_id=event_id, url=url)
                logger.info("Fetched %d players for event %s", len(league.players), event_id)
                return league
            except httpx.HTTPError as exc:
                last_error = exc
                if attempt == max_retries:
                    break
                delay = base_delay * (2 ** (attempt - 1))
                logger.warning(
                    "Fetch attempt %d for %s failed: %s. Retrying in %.1fs",
                    attempt,
                    url,
                    exc,
                    delay,
                )
                sleep(delay)
    finally:
        if owns_client:
            http.close()

    raise RosterFetchError(
        f"Failed to fetch league after {max_retries} attempts: {last_error}"
    ) from last_error
