"""Storage protocol — defines the contract all store backends must implement."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

PostingStatus = Literal["new", "sent", "contacted", "emailed"]

POSTING_STATUSES: tuple[str, ...] = ("new", "sent", "contacted", "emailed")

# Column definitions for each table, in schema order
USER_COLUMNS: tuple[str, ...] = (
    "id",
    "external_id",
    "portfolio",
    "keyword_preferences",
    "frequency",
)

JOB_COLUMNS: tuple[str, ...] = (
    "id",
    "source",
    "title",
    "company",
    "link",
    "excerpt",
    "tags",
    "posted_at",
    "score",
    "status",
    "saved_by",
    "created_at",
)

SCHEMA_SQL: str = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY,
    external_id TEXT UNIQUE,
    portfolio TEXT,
    keyword_preferences TEXT,
    frequency TEXT DEFAULT 'instant'
);
CREATE TABLE IF NOT EXISTS jobs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    source TEXT,
    title TEXT,
    company TEXT,
    link TEXT UNIQUE,
    excerpt TEXT,
    tags TEXT,
    posted_at TEXT,
    score REAL,
    status TEXT DEFAULT 'new',
    saved_by INTEGER,
    created_at TEXT DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_jobs_score ON jobs(score);
"""


@dataclass(frozen=True)
class NewPosting:
    """Fields supplied by the pipeline for a posting that passed admission."""

    source: str
    title: str
    link: str
    score: float
    company: str = ""
    excerpt: str = ""
    tags: str = ""
    posted_at: str = ""


@dataclass(frozen=True)
class JobPosting:
    """Immutable snapshot of a stored ``jobs`` row."""

    id: int
    source: str
    title: str
    company: str
    link: str
    excerpt: str
    tags: str
    posted_at: str
    score: float
    status: str
    saved_by: int | None
    created_at: str


@dataclass(frozen=True)
class Subscriber:
    """Immutable snapshot of a stored ``users`` row."""

    id: int
    external_id: str
    portfolio: str
    keyword_preferences: str
    frequency: str


class PostingStore(Protocol):
    """Protocol for the deduplicating posting store.

    Mutations return a no-op signal (``None`` / ``False``) instead of raising
    when the underlying write fails.
    """

    # -- postings ------------------------------------------------------------

    def insert_if_new(self, posting: NewPosting) -> JobPosting | None:
        """Insert unless ``link`` is known; return the row only if created."""
        ...

    def update_status(self, posting_id: int, status: str) -> bool:
        """Set the lifecycle status of a posting."""
        ...

    def set_saved_by(self, posting_id: int, subscriber_id: int) -> bool:
        """Record which subscriber bookmarked a posting."""
        ...

    def get_posting(self, posting_id: int) -> JobPosting | None:
        """Return a posting by id."""
        ...

    def list_saved(self, subscriber_id: int) -> list[JobPosting]:
        """Return postings saved by a subscriber, newest first."""
        ...

    def list_recent(self, limit: int = 10) -> list[JobPosting]:
        """Return the most recently created postings, newest first."""
        ...

    def count_postings(self) -> int:
        """Return the number of stored postings."""
        ...

    # -- subscribers ---------------------------------------------------------

    def ensure_subscriber(
        self, external_id: str, portfolio: str = ""
    ) -> Subscriber | None:
        """Create the subscriber if absent and return the stored row."""
        ...

    def get_subscriber(self, external_id: str) -> Subscriber | None:
        """Return a subscriber by platform id."""
        ...

    def list_subscriber_ids(self) -> list[str]:
        """Return every subscriber's external id in creation order."""
        ...

    def set_portfolio(self, external_id: str, url: str) -> bool:
        """Update a subscriber's portfolio URL."""
        ...

    def set_keyword_preferences(self, external_id: str, keywords: str) -> bool:
        """Update a subscriber's stored keyword preferences."""
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...
