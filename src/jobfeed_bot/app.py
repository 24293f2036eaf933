"""Application context — the one object every operation receives."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from jobfeed_bot.core.email_sender import ResendEmailSender
from jobfeed_bot.core.notifier import TelegramNotifier
from jobfeed_bot.storage import create_store
from jobfeed_bot.workflows.poll_cycle import PollCycle

if TYPE_CHECKING:
    from jobfeed_bot.config.settings import Settings
    from jobfeed_bot.core.email_sender import EmailSender
    from jobfeed_bot.core.notifier import Notifier
    from jobfeed_bot.storage.base import PostingStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Bundle of settings, store handle and collaborators.

    Replaces process-wide globals so several isolated instances (and
    hermetic tests) can coexist.
    """

    settings: Settings
    store: PostingStore
    notifier: Notifier
    email_sender: EmailSender
    poll_cycle: PollCycle = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.poll_cycle = PollCycle(self)

    def close(self) -> None:
        self.store.close()


def create_app(settings: Settings) -> AppContext:
    """Wire the production collaborators from *settings*."""
    if not settings.telegram_bot_token:
        logger.warning("TELEGRAM_BOT_TOKEN not set — deliveries will fail")
    return AppContext(
        settings=settings,
        store=create_store(settings),
        notifier=TelegramNotifier.from_settings(settings),
        email_sender=ResendEmailSender.from_settings(settings),
    )
