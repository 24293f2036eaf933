"""Shared pytest fixtures for jobfeed-bot tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator

import pytest

from jobfeed_bot.app import AppContext
from jobfeed_bot.config.settings import Settings, get_settings
from jobfeed_bot.exceptions import EmailNotConfiguredError
from jobfeed_bot.storage.base import JobPosting, NewPosting
from jobfeed_bot.storage.sqlite_backend import SqliteStore


@pytest.fixture()
def env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set minimal env vars and return them as a dict.

    Every test that needs a ``Settings`` instance should use this fixture
    (or ``settings``) to avoid leaking real ``.env`` values into tests.
    """
    values: dict[str, str] = {
        # Telegram
        "TELEGRAM_BOT_TOKEN": "123:test-token",
        "OWNER_TELEGRAM_ID": "999",
        # Feeds
        "RSS_FEEDS": "https://feeds.test/a.xml,https://feeds.test/b.xml",
        "KEYWORDS": "Hiring, remote",
        # Email
        "RESEND_API_KEY": "re_test_key",
        # Outreach
        "MY_NAME": "Test User",
        "PORTFOLIO_URL": "https://test.dev",
        # General
        "LOG_LEVEL": "DEBUG",
    }
    for key, val in values.items():
        monkeypatch.setenv(key, val)
    return values


@pytest.fixture()
def settings(env_vars: dict[str, str], tmp_path: Path) -> Generator[Settings, None, None]:
    """Return a fresh ``Settings`` loaded from mocked env vars.

    Clears the ``get_settings`` LRU cache before and after the test so
    singleton state never leaks between tests.
    """
    get_settings.cache_clear()
    yield Settings(_env_file=None, database_path=str(tmp_path / "jobs.sqlite"))
    get_settings.cache_clear()


@pytest.fixture()
def store(tmp_path: Path) -> Generator[SqliteStore, None, None]:
    """Create a SqliteStore in a temp directory."""
    s = SqliteStore(tmp_path / "jobs.sqlite")
    yield s
    s.close()


class FakeNotifier:
    """Records deliveries; recipients in ``fail_for`` fail, ``raise_for`` raise."""

    def __init__(
        self,
        fail_for: set[str] | None = None,
        raise_for: set[str] | None = None,
    ) -> None:
        self.fail_for = fail_for or set()
        self.raise_for = raise_for or set()
        self.calls: list[tuple[int, str]] = []

    def deliver(self, posting: JobPosting, recipient_id: str) -> bool:
        self.calls.append((posting.id, recipient_id))
        if recipient_id in self.raise_for:
            raise RuntimeError(f"boom for {recipient_id}")
        return recipient_id not in self.fail_for


class FakeEmailSender:
    """Records sends; configurable outcome."""

    def __init__(self, configured: bool = True, result: tuple[bool, str] = (True, "")):
        self._configured = configured
        self.result = result
        self.sent: list[tuple[str, str, str]] = []

    @property
    def configured(self) -> bool:
        return self._configured

    def send(self, to_email: str, subject: str, html: str) -> tuple[bool, str]:
        if not self._configured:
            raise EmailNotConfiguredError("RESEND_API_KEY not configured.")
        self.sent.append((to_email, subject, html))
        return self.result


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture()
def ctx(
    settings: Settings,
    store: SqliteStore,
    notifier: FakeNotifier,
    email_sender: FakeEmailSender,
) -> AppContext:
    """AppContext wired with a temp store and fake collaborators."""
    return AppContext(
        settings=settings,
        store=store,
        notifier=notifier,
        email_sender=email_sender,
    )


@pytest.fixture()
def make_posting() -> Callable[..., NewPosting]:
    """Factory for NewPosting with sensible defaults; kwargs override fields."""

    def _make(**overrides: object) -> NewPosting:
        fields: dict[str, object] = {
            "source": "https://feeds.test/a.xml",
            "title": "Senior React Developer",
            "link": "https://jobs.test/1",
            "score": 3.5,
            "company": "Acme Labs",
            "excerpt": "Build a dApp frontend. Contact hr@acme.test or @acme_jobs",
            "tags": "React, Web3",
            "posted_at": "Mon, 01 Jan 2026 10:00:00 GMT",
        }
        fields.update(overrides)
        return NewPosting(**fields)  # type: ignore[arg-type]

    return _make
