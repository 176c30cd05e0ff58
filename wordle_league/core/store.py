#!/usr/bin/python
from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from .models import ResultRow

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS players (
    user_id TEXT PRIMARY KEY,
    display_name TEXT,
    first_seen_at TEXT
);
CREATE TABLE IF NOT EXISTS games (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    puzzle_number INTEGER,
    date_iso TEXT UNIQUE
);
CREATE TABLE IF NOT EXISTS results (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    game_id INTEGER NOT NULL,
    guesses INTEGER,
    failed INTEGER NOT NULL DEFAULT 0,
    raw TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE(user_id, game_id),
    FOREIGN KEY (user_id) REFERENCES players(user_id),
    FOREIGN KEY (game_id) REFERENCES games(id)
);
CREATE TABLE IF NOT EXISTS aliases (
    handle TEXT PRIMARY KEY,
    user_id TEXT NOT NULL
);
"""

_RESULT_SELECT = """
SELECT r.user_id, g.puzzle_number, g.date_iso, r.guesses, r.failed, r.raw
FROM results r JOIN games g ON g.id = r.game_id
"""


def normalize_handle(handle: str) -> str:
    """'  Zahir Hassan' / '@Zahir Hassan' -> '@zahir hassan'"""
    h = (handle or "").strip().lstrip("@").strip().lower()
    return f"@{h}" if h else ""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_row(rec: sqlite3.Row) -> ResultRow:
    return ResultRow(
        user_id=rec["user_id"],
        puzzle_number=rec["puzzle_number"],
        date_iso=rec["date_iso"],
        guesses=rec["guesses"],
        failed=bool(rec["failed"]),
        raw=rec["raw"],
    )


class ResultStore:
    """
    SQLite-backed result storage. One result per (user, day); writing the
    same day again overwrites guesses/failed/raw.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row
        self.conn.executescript(SCHEMA)

    @classmethod
    def open(cls, path: str | Path = "data/wordle.sqlite") -> "ResultStore":
        if str(path) != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path))
        conn.execute("PRAGMA journal_mode = WAL")
        logger.info("ResultStore.open: using database %s", path)
        return cls(conn)

    def close(self):
        self.conn.close()

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------
    def upsert_result(self, row: ResultRow) -> None:
        if row.failed != (row.guesses is None):
            raise ValueError(f"inconsistent result for {row.user_id} on {row.date_iso}: "
                             f"failed={row.failed} guesses={row.guesses}")
        if row.guesses is not None and not 1 <= row.guesses <= 6:
            raise ValueError(f"guesses out of range for {row.user_id}: {row.guesses}")

        now = _now_iso()
        with self.conn:
            self.conn.execute(
                "INSERT OR IGNORE INTO players (user_id, first_seen_at) VALUES (?, ?)",
                (row.user_id, now),
            )
            self.conn.execute(
                "INSERT OR IGNORE INTO games (puzzle_number, date_iso) VALUES (?, ?)",
                (row.puzzle_number, row.date_iso),
            )
            game_id = self.conn.execute(
                "SELECT id FROM games WHERE date_iso = ?", (row.date_iso,)
            ).fetchone()["id"]
            self.conn.execute(
                """
                INSERT INTO results (user_id, game_id, guesses, failed, raw, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, game_id) DO UPDATE SET
                    guesses = excluded.guesses,
                    failed = excluded.failed,
                    raw = excluded.raw,
                    updated_at = excluded.updated_at
                """,
                (row.user_id, game_id, row.guesses, int(row.failed), row.raw, now, now),
            )
        logger.debug("upsert_result: user_id=%s date=%s guesses=%s failed=%s",
                     row.user_id, row.date_iso, row.guesses, row.failed)

    def all_results(self) -> List[ResultRow]:
        # Single statement read: one consistent snapshot for aggregation
        recs = self.conn.execute(_RESULT_SELECT + " ORDER BY g.date_iso, r.id").fetchall()
        return [_to_row(r) for r in recs]

    def results_for_user(self, user_id: str) -> List[ResultRow]:
        recs = self.conn.execute(
            _RESULT_SELECT + " WHERE r.user_id = ? ORDER BY g.date_iso", (user_id,)
        ).fetchall()
        return [_to_row(r) for r in recs]

    # -------------------------------------------------------------------------
    # Players
    # -------------------------------------------------------------------------
    def set_display_name(self, user_id: str, name: str) -> None:
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO players (user_id, display_name, first_seen_at) VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET display_name = excluded.display_name
                """,
                (user_id, name, _now_iso()),
            )

    def display_names(self) -> Dict[str, str]:
        recs = self.conn.execute(
            "SELECT user_id, display_name FROM players WHERE display_name IS NOT NULL"
        ).fetchall()
        return {r["user_id"]: r["display_name"] for r in recs}

    # -------------------------------------------------------------------------
    # Aliases
    # -------------------------------------------------------------------------
    def set_alias(self, handle: str, user_id: str) -> None:
        key = normalize_handle(handle)
        if not key:
            raise ValueError("alias handle must not be empty")
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO aliases (handle, user_id) VALUES (?, ?)
                ON CONFLICT(handle) DO UPDATE SET user_id = excluded.user_id
                """,
                (key, str(user_id)),
            )

    def get_alias(self, handle: str) -> Optional[str]:
        rec = self.conn.execute(
            "SELECT user_id FROM aliases WHERE handle = ?", (normalize_handle(handle),)
        ).fetchone()
        return rec["user_id"] if rec else None

    def list_aliases(self) -> Dict[str, str]:
        recs = self.conn.execute("SELECT handle, user_id FROM aliases ORDER BY handle").fetchall()
        return {r["handle"]: r["user_id"] for r in recs}

    def remove_alias(self, handle: str) -> bool:
        with self.conn:
            cur = self.conn.execute("DELETE FROM aliases WHERE handle = ?", (normalize_handle(handle),))
        return cur.rowcount > 0

    def seed_aliases(self, path: str | Path) -> int:
        """
        Load {"@handle": "user_id"} pairs from a JSON file.
        Existing aliases are kept; a missing file is not an error.
        """
        p = Path(path)
        if not p.exists():
            logger.debug("seed_aliases: %s not found, skipping", p)
            return 0
        data = json.loads(p.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{p}: expected a JSON object of handle -> user id")

        added = 0
        with self.conn:
            for handle, user_id in data.items():
                key = normalize_handle(handle)
                if not key:
                    continue
                cur = self.conn.execute(
                    "INSERT OR IGNORE INTO aliases (handle, user_id) VALUES (?, ?)",
                    (key, str(user_id)),
                )
                added += cur.rowcount
        logger.info("seed_aliases: %s new aliases from %s", added, p)
        return added

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------
    def counts(self) -> Dict[str, int]:
        return {
            table: self.conn.execute(f"SELECT COUNT(*) AS c FROM {table}").fetchone()["c"]
            for table in ("results", "games", "players", "aliases")
        }

    def clear(self, keep_players: bool = False, drop_aliases: bool = False, vacuum: bool = False) -> None:
        # results -> games -> players, so foreign keys stay satisfied
        with self.conn:
            self.conn.execute("DELETE FROM results")
            self.conn.execute("DELETE FROM games")
            if not keep_players:
                self.conn.execute("DELETE FROM players")
            if drop_aliases:
                self.conn.execute("DELETE FROM aliases")
        if vacuum:
            self.conn.execute("VACUUM")
        logger.info("clear: keep_players=%s drop_aliases=%s vacuum=%s", keep_players, drop_aliases, vacuum)
