"""Persistence layer for league rosters, generated matchings and match history."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from podleague.config.league import DB_PATH_ENV
from podleague.engine.service import record_matchings
from podleague.models import AssignmentResult, League, MatchHistory


logger = logging.getLogger(__name__)


def period_key(period: str) -> str:
    return period.strip().lower()


class LeagueStore:
    """SQLite-backed store keyed by event id (and period for matchings)."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv(DB_PATH_ENV)
        if env_db:
            if env_db.startswith("file:"):
                self.db_path: Path | str = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.OperationalError:
            fallback_dir = Path(tempfile.gettempdir()) / "podleague-runtime"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback = fallback_dir / "podleague.sqlite"
            logger.warning("Could not open %s; falling back to %s", self.db_path, fallback)
            conn = sqlite3.connect(fallback)
            self.db_path = fallback
            self._use_uri = False
            self._create_schema(conn)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS leagues (
                event_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                url TEXT NOT NULL,
                players_json TEXT NOT NULL,
                last_updated TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS matchings (
                event_id TEXT NOT NULL,
                period_key TEXT NOT NULL,
                period TEXT NOT NULL,
                generated_at TEXT NOT NULL,
                result_json TEXT NOT NULL,
                PRIMARY KEY (event_id, period_key)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS histories (
                event_id TEXT PRIMARY KEY,
                pairings_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def save_league(self, league: League) -> None:
        players = [player.model_dump(mode="json") for player in league.players]
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO leagues (event_id, name, url, players_json, last_updated)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(event_id) DO UPDATE SET
                    name = excluded.name,
                    url = excluded.url,
                    players_json = excluded.players_json,
                    last_updated = excluded.last_updated
                """,
                (
                    league.event_id,
                    league.name,
                    league.url,
                    json.dumps(players),
                    league.last_updated.isoformat(),
                ),
            )
            conn.commit()

    def get_league(self, event_id: str) -> Optional[League]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM leagues WHERE event_id = ?", (event_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_league(row)

    def list_leagues(self) -> List[League]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM leagues ORDER BY datetime(last_updated) DESC"
            ).fetchall()
        return [self._row_to_league(row) for row in rows]

    def save_matchings(self, result: AssignmentResult) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO matchings (event_id, period_key, period, generated_at, result_json)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(event_id, period_key) DO UPDATE SET
                    period = excluded.period,
                    generated_at = excluded.generated_at,
                    result_json = excluded.result_json
                """,
                (
                    result.event_id,
                    period_key(result.period),
                    result.period,
                    result.generated_at.isoformat(),
                    result.model_dump_json(),
                ),
            )
            conn.commit()

    def get_matchings(self, event_id: str, period: str) -> Optional[AssignmentResult]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT result_json FROM matchings WHERE event_id = ? AND period_key = ?",
                (event_id, period_key(period)),
            ).fetchone()
        if row is None:
            return None
        return AssignmentResult.model_validate_json(row["result_json"])

    def list_matchings(self, event_id: str) -> List[AssignmentResult]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT result_json FROM matchings WHERE event_id = ? ORDER BY datetime(generated_at)",
                (event_id,),
            ).fetchall()
        return [AssignmentResult.model_validate_json(row["result_json"]) for row in rows]

    def get_history(self, event_id: str) -> Optional[MatchHistory]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT pairings_json FROM histories WHERE event_id = ?", (event_id,)
            ).fetchone()
        if row is None:
            return None
        return MatchHistory(event_id=event_id, pairings=json.loads(row["pairings_json"]))

    def load_history(self, event_id: str) -> MatchHistory:
        return self.get_history(event_id) or MatchHistory(event_id=event_id)

    def save_history(self, event_id: str, history: MatchHistory) -> None:
        pairings = [pairing.model_dump(mode="json") for pairing in history.pairings]
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO histories (event_id, pairings_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(event_id) DO UPDATE SET
                    pairings_json = excluded.pairings_json,
                    updated_at = excluded.updated_at
                """,
                (event_id, json.dumps(pairings), now),
            )
            conn.commit()

    def record_matches(self, event_id: str, result: AssignmentResult) -> MatchHistory:
        """Fold ``result`` into the stored ledger and return the saved ledger."""

        history = record_matchings(self.load_history(event_id), result)
        self.save_history(event_id, history)
        return history

    def replace_period(self, event_id: str, result: AssignmentResult) -> MatchHistory:
        """Replace any ledger entries for ``result.period`` with ``result``'s matches."""

        history = self.load_history(event_id).without_period(result.period)
        history = record_matchings(history, result)
        self.save_history(event_id, history)
        return history

    def _row_to_league(self, row: sqlite3.Row) -> League:
        return League(
            event_id=row["event_id"],
            name=row["name"],
            url=row["url"],
            players=json.loads(row["players_json"]),
            last_updated=datetime.fromisoformat(row["last_updated"]),
        )


__all__ = ["LeagueStore", "period_key"]
