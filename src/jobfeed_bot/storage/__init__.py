"""Storage package — factory for the posting store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jobfeed_bot.storage.base import (
    JOB_COLUMNS,
    POSTING_STATUSES,
    USER_COLUMNS,
    JobPosting,
    NewPosting,
    PostingStatus,
    PostingStore,
    Subscriber,
)
from jobfeed_bot.storage.sqlite_backend import SqliteStore

if TYPE_CHECKING:
    from jobfeed_bot.config.settings import Settings

logger = logging.getLogger(__name__)

__all__ = [
    "JOB_COLUMNS",
    "POSTING_STATUSES",
    "USER_COLUMNS",
    "JobPosting",
    "NewPosting",
    "PostingStatus",
    "PostingStore",
    "SqliteStore",
    "Subscriber",
    "create_store",
]


def create_store(settings: Settings) -> PostingStore:
    """Open the SQLite store at ``settings.database_path``."""
    store = SqliteStore(settings.database_path)
    logger.info("Using SQLite storage backend (file: %s)", settings.database_path)
    return store
