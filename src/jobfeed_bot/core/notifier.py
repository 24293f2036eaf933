"""Posting delivery to chat subscribers via the Telegram Bot API."""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Protocol

import requests

from jobfeed_bot.config.defaults import NOTIFICATION_EXCERPT_CHARS

if TYPE_CHECKING:
    from jobfeed_bot.config.settings import Settings
    from jobfeed_bot.storage.base import JobPosting

logger = logging.getLogger(__name__)

# Characters with meaning in Telegram's legacy Markdown parse mode
_MARKDOWN_SPECIAL = re.compile(r"([_*`\[])")


class Notifier(Protocol):
    """Delivers one posting to one recipient."""

    def deliver(self, posting: JobPosting, recipient_id: str) -> bool:
        """Return True when the platform accepted the message."""
        ...


def escape_markdown(text: str) -> str:
    """Backslash-escape legacy Markdown entities so free text cannot break parsing."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def format_posting_message(posting: JobPosting) -> str:
    """Build the Markdown notification text for a posting.

    Feed-supplied fields are escaped; only the title and company markup is
    ours.
    """
    lines = [f"*{escape_markdown(posting.title)}*"]
    if posting.company:
        lines.append(f"_{escape_markdown(posting.company)}_")
    if posting.excerpt:
        excerpt = posting.excerpt[:NOTIFICATION_EXCERPT_CHARS]
        lines.append(escape_markdown(excerpt) + "...")
        lines.append("")
    lines.append(f"Tags: {escape_markdown(posting.tags) or '-'}")
    lines.append(f"🔗 {escape_markdown(posting.link)}")
    lines.append(f"⭐ Score: {posting.score:g}")
    lines.append(f"🆔 {posting.id}")
    return "\n".join(lines)


def build_posting_keyboard(posting: JobPosting) -> dict:
    """Inline buttons: save / contact callbacks and a direct apply link."""
    return {
        "inline_keyboard": [
            [
                {"text": "⭐ Save", "callback_data": f"save_{posting.id}"},
                {"text": "✉️ Contact Founder", "callback_data": f"contact_{posting.id}"},
            ],
            [{"text": "Apply (link)", "url": posting.link}],
        ]
    }


class TelegramNotifier:
    """Send postings as Telegram direct messages."""

    def __init__(
        self,
        token: str,
        *,
        api_base: str = "https://api.telegram.org",
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> TelegramNotifier:
        return cls(
            settings.telegram_bot_token,
            api_base=settings.telegram_api_base,
            timeout=settings.notify_timeout_seconds,
        )

    def _url(self, method: str) -> str:
        return f"{self._api_base}/bot{self._token}/{method}"

    def _call(self, method: str, payload: dict | None = None) -> dict | None:
        """POST a Bot API method; return the decoded body or None on failure."""
        try:
            response = self._session.post(
                self._url(method), json=payload or {}, timeout=self._timeout
            )
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Telegram %s failed: %s", method, exc)
            return None

        if not body.get("ok"):
            logger.warning(
                "Telegram %s rejected (HTTP %d): %s",
                method,
                response.status_code,
                body.get("description", "unknown error"),
            )
            return None
        return body

    def deliver(self, posting: JobPosting, recipient_id: str) -> bool:
        """Send *posting* to chat *recipient_id*."""
        payload = {
            "chat_id": recipient_id,
            "text": format_posting_message(posting),
            "parse_mode": "Markdown",
            "reply_markup": json.dumps(build_posting_keyboard(posting)),
        }
        if self._call("sendMessage", payload) is None:
            return False
        logger.debug("Delivered posting %d to %s", posting.id, recipient_id)
        return True

    def check_connection(self) -> bool:
        """Probe the bot token with ``getMe``."""
        body = self._call("getMe")
        if body is None:
            return False
        username = body.get("result", {}).get("username", "?")
        logger.info("Telegram bot connected as @%s", username)
        return True
