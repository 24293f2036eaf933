"""SQLite storage backend — single-file durable store for postings and subscribers."""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path

from jobfeed_bot.storage.base import (
    POSTING_STATUSES,
    SCHEMA_SQL,
    JobPosting,
    NewPosting,
    Subscriber,
)

logger = logging.getLogger(__name__)

_INSERT_JOB = (
    "INSERT OR IGNORE INTO jobs "
    "(source, title, company, link, excerpt, tags, posted_at, score) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
)


def _row_to_posting(row: sqlite3.Row) -> JobPosting:
    """Convert a ``jobs`` row to a JobPosting snapshot."""
    return JobPosting(
        id=row["id"],
        source=row["source"] or "",
        title=row["title"] or "",
        company=row["company"] or "",
        link=row["link"],
        excerpt=row["excerpt"] or "",
        tags=row["tags"] or "",
        posted_at=row["posted_at"] or "",
        score=float(row["score"] or 0.0),
        status=row["status"] or "new",
        saved_by=row["saved_by"],
        created_at=row["created_at"] or "",
    )


def _row_to_subscriber(row: sqlite3.Row) -> Subscriber:
    """Convert a ``users`` row to a Subscriber snapshot."""
    return Subscriber(
        id=row["id"],
        external_id=str(row["external_id"]),
        portfolio=row["portfolio"] or "",
        keyword_preferences=row["keyword_preferences"] or "",
        frequency=row["frequency"] or "instant",
    )


class SqliteStore:
    """Deduplicating store backed by one SQLite file.

    Every operation runs under a single re-entrant lock and every mutation
    commits before returning, so a successful call survives a crash right
    after it. Read and write failures are logged and reported as ``None``,
    ``False`` or an empty list.
    """

    def __init__(self, path: str | Path = "jobs.sqlite") -> None:
        self._path = str(path)
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        with self._lock:
            self._conn.executescript(SCHEMA_SQL)
            self._conn.commit()
        logger.info("Opened SQLite store: %s", self._path)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _write(self, sql: str, params: tuple = ()) -> sqlite3.Cursor | None:
        """Execute and commit one statement; return None on failure."""
        with self._lock:
            try:
                cursor = self._conn.execute(sql, params)
                self._conn.commit()
                return cursor
            except sqlite3.Error:
                logger.exception("Store write failed: %s", sql.split("(")[0].strip())
                try:
                    self._conn.rollback()
                except sqlite3.Error:
                    logger.warning("Rollback failed after store write error")
                return None

    def _fetch_one(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        """Run a read; None on failure."""
        with self._lock:
            try:
                return self._conn.execute(sql, params).fetchone()
            except sqlite3.Error:
                logger.exception("Store read failed: %s", sql)
                return None

    def _fetch_all(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Run a read; empty list on failure."""
        with self._lock:
            try:
                return self._conn.execute(sql, params).fetchall()
            except sqlite3.Error:
                logger.exception("Store read failed: %s", sql)
                return []

    # ------------------------------------------------------------------
    # Postings
    # ------------------------------------------------------------------

    def insert_if_new(self, posting: NewPosting) -> JobPosting | None:
        """Insert unless ``link`` already exists.

        Returns the freshly created row, or None when the link was already
        known (or the write failed). Callers dispatch only on a non-None
        result.
        """
        with self._lock:
            cursor = self._write(
                _INSERT_JOB,
                (
                    posting.source,
                    posting.title,
                    posting.company,
                    posting.link,
                    posting.excerpt,
                    posting.tags,
                    posting.posted_at,
                    posting.score,
                ),
            )
            if cursor is None or cursor.rowcount != 1:
                logger.debug("Posting already known: %s", posting.link)
                return None
            return self.get_posting(cursor.lastrowid)

    def update_status(self, posting_id: int, status: str) -> bool:
        """Set the lifecycle status of a posting.

        Raises ValueError for a status outside ``POSTING_STATUSES``.
        """
        if status not in POSTING_STATUSES:
            raise ValueError(f"Unknown posting status: {status!r}")
        cursor = self._write(
            "UPDATE jobs SET status = ? WHERE id = ?", (status, posting_id)
        )
        if cursor is None:
            return False
        logger.debug("Posting %d status -> %s", posting_id, status)
        return cursor.rowcount == 1

    def set_saved_by(self, posting_id: int, subscriber_id: int) -> bool:
        """Record which subscriber bookmarked a posting."""
        cursor = self._write(
            "UPDATE jobs SET saved_by = ? WHERE id = ?", (subscriber_id, posting_id)
        )
        return cursor is not None and cursor.rowcount == 1

    def get_posting(self, posting_id: int) -> JobPosting | None:
        """Return a posting by id."""
        row = self._fetch_one("SELECT * FROM jobs WHERE id = ?", (posting_id,))
        return _row_to_posting(row) if row else None

    def get_posting_by_link(self, link: str) -> JobPosting | None:
        """Return a posting by its dedup key."""
        row = self._fetch_one("SELECT * FROM jobs WHERE link = ?", (link,))
        return _row_to_posting(row) if row else None

    def list_saved(self, subscriber_id: int) -> list[JobPosting]:
        """Return postings saved by a subscriber, newest first."""
        rows = self._fetch_all(
            "SELECT * FROM jobs WHERE saved_by = ? ORDER BY created_at DESC, id DESC",
            (subscriber_id,),
        )
        return [_row_to_posting(r) for r in rows]

    def list_recent(self, limit: int = 10) -> list[JobPosting]:
        """Return the most recently created postings, newest first."""
        rows = self._fetch_all(
            "SELECT * FROM jobs ORDER BY created_at DESC, id DESC LIMIT ?",
            (max(limit, 0),),
        )
        return [_row_to_posting(r) for r in rows]

    def count_postings(self) -> int:
        """Return the number of stored postings."""
        row = self._fetch_one("SELECT COUNT(*) AS n FROM jobs")
        return int(row["n"]) if row else 0

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------

    def ensure_subscriber(
        self, external_id: str, portfolio: str = ""
    ) -> Subscriber | None:
        """Create the subscriber if absent; an existing row is left untouched."""
        with self._lock:
            cursor = self._write(
                "INSERT OR IGNORE INTO users (external_id, portfolio) VALUES (?, ?)",
                (str(external_id), portfolio),
            )
            if cursor is None:
                return None
            if cursor.rowcount == 1:
                logger.info("Registered subscriber %s", external_id)
            return self.get_subscriber(external_id)

    def get_subscriber(self, external_id: str) -> Subscriber | None:
        """Return a subscriber by platform id."""
        row = self._fetch_one(
            "SELECT * FROM users WHERE external_id = ?", (str(external_id),)
        )
        return _row_to_subscriber(row) if row else None

    def list_subscriber_ids(self) -> list[str]:
        """Return every subscriber's external id in creation order."""
        rows = self._fetch_all("SELECT external_id FROM users ORDER BY id")
        return [str(r["external_id"]) for r in rows]

    def set_portfolio(self, external_id: str, url: str) -> bool:
        """Update a subscriber's portfolio URL."""
        cursor = self._write(
            "UPDATE users SET portfolio = ? WHERE external_id = ?",
            (url, str(external_id)),
        )
        return cursor is not None and cursor.rowcount == 1

    def set_keyword_preferences(self, external_id: str, keywords: str) -> bool:
        """Update a subscriber's stored keyword preferences."""
        cursor = self._write(
            "UPDATE users SET keyword_preferences = ? WHERE external_id = ?",
            (keywords, str(external_id)),
        )
        return cursor is not None and cursor.rowcount == 1

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()
