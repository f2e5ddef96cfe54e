"""SQLite-backed archive of generated strategic briefs."""

from __future__ import annotations

import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from gamepulse.models import ALL, StrategicBrief

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS strategic_briefs (
    date            TEXT NOT NULL,
    platform_filter TEXT NOT NULL DEFAULT 'all',
    brief_text      TEXT NOT NULL,
    created_at      TEXT NOT NULL,
    PRIMARY KEY (date, platform_filter)
);
"""

_COLUMNS = "date, platform_filter, brief_text, created_at"


class BriefStore:
    """One brief per day and platform filter; saving again replaces it."""

    def __init__(self, db_path: Path) -> None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db_path = db_path
        self._init_db()

    # ── public ──────────────────────────────────────────────────────────

    def save(self, brief: StrategicBrief) -> StrategicBrief:
        """Insert or replace *brief*; stamps ``created_at`` when missing."""
        stored = brief.model_copy(
            update={"created_at": brief.created_at or datetime.now(UTC)}
        )
        con = self._connect()
        try:
            con.execute(
                f"INSERT OR REPLACE INTO strategic_briefs ({_COLUMNS}) VALUES (?, ?, ?, ?)",
                (
                    stored.date,
                    stored.platform_filter,
                    stored.brief_text,
                    stored.created_at.isoformat(),  # type: ignore[union-attr]
                ),
            )
            con.commit()
        finally:
            con.close()
        logger.info("Stored brief for %s [%s]", stored.date, stored.platform_filter)
        return stored

    def get(self, date: str, platform_filter: str = ALL) -> StrategicBrief | None:
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM strategic_briefs WHERE date = ? AND platform_filter = ?",
            (date, platform_filter),
        )

    def latest(self, platform_filter: str = ALL) -> StrategicBrief | None:
        """Most recent brief for *platform_filter*, or ``None``."""
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM strategic_briefs WHERE platform_filter = ? "
            "ORDER BY date DESC LIMIT 1",
            (platform_filter,),
        )

    # ── private ─────────────────────────────────────────────────────────

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self._db_path))

    def _init_db(self) -> None:
        con = self._connect()
        con.executescript(_SCHEMA)
        con.close()

    def _fetch_one(self, sql: str, params: tuple[str, ...]) -> StrategicBrief | None:
        con = self._connect()
        try:
            row = con.execute(sql, params).fetchone()
        finally:
            con.close()
        if row is None:
            return None
        date, platform_filter, brief_text, created_at = row
        return StrategicBrief(
            date=date,
            platform_filter=platform_filter,
            brief_text=brief_text,
            created_at=created_at,
        )
