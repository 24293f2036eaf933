"""Tests for the storage layer — schema, SqliteStore, factory."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Callable
from unittest.mock import patch

import pytest

from jobfeed_bot.config.settings import Settings
from jobfeed_bot.storage import create_store
from jobfeed_bot.storage.base import (
    JOB_COLUMNS,
    POSTING_STATUSES,
    USER_COLUMNS,
    NewPosting,
)
from jobfeed_bot.storage.sqlite_backend import SqliteStore

MakePosting = Callable[..., NewPosting]


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class TestSchema:
    """The on-disk layout must match the documented field set exactly."""

    def _columns(self, path: Path, table: str) -> tuple[str, ...]:
        with sqlite3.connect(path) as conn:
            rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
        return tuple(r[1] for r in rows)

    def test_jobs_columns(self, store: SqliteStore, tmp_path: Path) -> None:
        assert self._columns(tmp_path / "jobs.sqlite", "jobs") == JOB_COLUMNS

    def test_users_columns(self, store: SqliteStore, tmp_path: Path) -> None:
        assert self._columns(tmp_path / "jobs.sqlite", "users") == USER_COLUMNS

    def test_score_index_exists(self, store: SqliteStore, tmp_path: Path) -> None:
        with sqlite3.connect(tmp_path / "jobs.sqlite") as conn:
            names = [r[1] for r in conn.execute("PRAGMA index_list(jobs)")]
        assert "idx_jobs_score" in names

    def test_statuses(self) -> None:
        assert POSTING_STATUSES == ("new", "sent", "contacted", "emailed")

    def test_reopen_keeps_data(self, tmp_path: Path, make_posting: MakePosting) -> None:
        first = SqliteStore(tmp_path / "jobs.sqlite")
        first.insert_if_new(make_posting())
        first.close()

        second = SqliteStore(tmp_path / "jobs.sqlite")
        try:
            assert second.count_postings() == 1
        finally:
            second.close()


# ---------------------------------------------------------------------------
# insert_if_new
# ---------------------------------------------------------------------------


class TestInsertIfNew:
    def test_fresh_insert_returns_posting(
        self, store: SqliteStore, make_posting: MakePosting
    ) -> None:
        posting = store.insert_if_new(make_posting())
        assert posting is not None
        assert posting.id >= 1
        assert posting.status == "new"
        assert posting.saved_by is None
        assert posting.created_at
        assert posting.score == 3.5
        assert posting.tags == "React, Web3"

    def test_duplicate_link_is_already_known(
        self, store: SqliteStore, make_posting: MakePosting
    ) -> None:
        first = store.insert_if_new(make_posting(link="https://x/1", title="First"))
        second = store.insert_if_new(make_posting(link="https://x/1", title="Second"))

        assert first is not None
        assert second is None
        assert store.count_postings() == 1
        assert store.get_posting(first.id).title == "First"

    def test_link_match_is_exact(
        self, store: SqliteStore, make_posting: MakePosting
    ) -> None:
        store.insert_if_new(make_posting(link="https://x/1"))
        other = store.insert_if_new(make_posting(link="https://x/1/"))
        assert other is not None
        assert store.count_postings() == 2

    def test_ids_increase(self, store: SqliteStore, make_posting: MakePosting) -> None:
        a = store.insert_if_new(make_posting(link="https://x/a"))
        b = store.insert_if_new(make_posting(link="https://x/b"))
        assert b.id > a.id

    def test_write_error_returns_none(
        self, store: SqliteStore, make_posting: MakePosting
    ) -> None:
        store._conn.execute("DROP TABLE jobs")
        assert store.insert_if_new(make_posting()) is None

    def test_read_error_returns_empty(self, store: SqliteStore) -> None:
        store._conn.execute("DROP TABLE jobs")
        assert store.list_recent(5) == []
        assert store.get_posting(1) is None
        assert store.count_postings() == 0


# ---------------------------------------------------------------------------
# Status and ownership
# ---------------------------------------------------------------------------


class TestStatusAndSaved:
    def test_update_status_persists(
        self, store: SqliteStore, make_posting: MakePosting, tmp_path: Path
    ) -> None:
        posting = store.insert_if_new(make_posting())
        assert store.update_status(posting.id, "sent") is True

        # Visible from an independent connection immediately
        with sqlite3.connect(tmp_path / "jobs.sqlite") as conn:
            status = conn.execute(
                "SELECT status FROM jobs WHERE id = ?", (posting.id,)
            ).fetchone()[0]
        assert status == "sent"

    @pytest.mark.parametrize("status", ["new", "sent", "contacted", "emailed"])
    def test_any_status_settable(
        self, store: SqliteStore, make_posting: MakePosting, status: str
    ) -> None:
        posting = store.insert_if_new(make_posting())
        store.update_status(posting.id, "emailed")
        assert store.update_status(posting.id, status) is True
        assert store.get_posting(posting.id).status == status

    def test_unknown_status_raises(
        self, store: SqliteStore, make_posting: MakePosting
    ) -> None:
        posting = store.insert_if_new(make_posting())
        with pytest.raises(ValueError):
            store.update_status(posting.id, "archived")

    def test_update_missing_posting(self, store: SqliteStore) -> None:
        assert store.update_status(404, "sent") is False

    def test_saved_by_independent_of_status(
        self, store: SqliteStore, make_posting: MakePosting
    ) -> None:
        posting = store.insert_if_new(make_posting())
        store.update_status(posting.id, "contacted")
        assert store.set_saved_by(posting.id, 7) is True

        reloaded = store.get_posting(posting.id)
        assert reloaded.saved_by == 7
        assert reloaded.status == "contacted"

    def test_list_saved_newest_first(
        self, store: SqliteStore, make_posting: MakePosting
    ) -> None:
        a = store.insert_if_new(make_posting(link="https://x/a"))
        b = store.insert_if_new(make_posting(link="https://x/b"))
        c = store.insert_if_new(make_posting(link="https://x/c"))
        store.set_saved_by(a.id, 1)
        store.set_saved_by(c.id, 1)
        store.set_saved_by(b.id, 2)

        assert [p.id for p in store.list_saved(1)] == [c.id, a.id]

    def test_list_recent_limit(
        self, store: SqliteStore, make_posting: MakePosting
    ) -> None:
        ids = [
            store.insert_if_new(make_posting(link=f"https://x/{i}")).id
            for i in range(5)
        ]
        recent = store.list_recent(limit=3)
        assert [p.id for p in recent] == ids[::-1][:3]

    def test_get_by_link(self, store: SqliteStore, make_posting: MakePosting) -> None:
        posting = store.insert_if_new(make_posting(link="https://x/9"))
        assert store.get_posting_by_link("https://x/9").id == posting.id
        assert store.get_posting_by_link("https://x/0") is None


# ---------------------------------------------------------------------------
# Subscribers
# ---------------------------------------------------------------------------


class TestSubscribers:
    def test_ensure_is_idempotent(self, store: SqliteStore) -> None:
        first = store.ensure_subscriber("42", portfolio="https://me.dev")
        second = store.ensure_subscriber("42", portfolio="https://other.dev")

        assert first.id == second.id
        assert second.portfolio == "https://me.dev"
        assert store.list_subscriber_ids() == ["42"]

    def test_defaults(self, store: SqliteStore) -> None:
        sub = store.ensure_subscriber("42")
        assert sub.frequency == "instant"
        assert sub.keyword_preferences == ""

    def test_subscriber_order(self, store: SqliteStore) -> None:
        for ext in ("3", "1", "2"):
            store.ensure_subscriber(ext)
        assert store.list_subscriber_ids() == ["3", "1", "2"]

    def test_set_portfolio(self, store: SqliteStore) -> None:
        store.ensure_subscriber("42")
        assert store.set_portfolio("42", "https://new.dev") is True
        assert store.get_subscriber("42").portfolio == "https://new.dev"

    def test_set_portfolio_unknown(self, store: SqliteStore) -> None:
        assert store.set_portfolio("nope", "https://new.dev") is False

    def test_set_keyword_preferences(self, store: SqliteStore) -> None:
        store.ensure_subscriber("42")
        assert store.set_keyword_preferences("42", "react, solidity") is True
        assert store.get_subscriber("42").keyword_preferences == "react, solidity"

    def test_get_missing(self, store: SqliteStore) -> None:
        assert store.get_subscriber("missing") is None

    def test_read_error_returns_empty(self, store: SqliteStore) -> None:
        store.ensure_subscriber("42")
        store._conn.execute("DROP TABLE users")

        assert store.list_subscriber_ids() == []
        assert store.get_subscriber("42") is None


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestCreateStore:
    def test_uses_database_path(self, settings: Settings) -> None:
        store = create_store(settings)
        try:
            assert isinstance(store, SqliteStore)
            assert Path(settings.database_path).exists()
        finally:
            store.close()

    def test_creates_parent_dir(self, settings: Settings, tmp_path: Path) -> None:
        settings.database_path = str(tmp_path / "nested" / "db.sqlite")
        store = create_store(settings)
        store.close()
        assert (tmp_path / "nested" / "db.sqlite").exists()

    def test_logs_backend(self, settings: Settings) -> None:
        with patch("jobfeed_bot.storage.logger") as mock_logger:
            create_store(settings).close()
        mock_logger.info.assert_called_once()
