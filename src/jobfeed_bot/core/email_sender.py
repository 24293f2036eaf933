"""Resend HTTP email sender with retry logic."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Protocol

import requests

from jobfeed_bot.exceptions import EmailNotConfiguredError

if TYPE_CHECKING:
    from jobfeed_bot.config.settings import Settings

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_DELAY_SECONDS = 5


class EmailSender(Protocol):
    """Sends one HTML email."""

    @property
    def configured(self) -> bool:
        """False when no provider credential is set."""
        ...

    def send(self, to_email: str, subject: str, html: str) -> tuple[bool, str]:
        """Return (success, error_message)."""
        ...


class ResendEmailSender:
    """Deliver outreach email through the Resend API."""

    def __init__(
        self,
        *,
        api_key: str,
        sender: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self._sender = sender
        self._api_url = api_url
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> ResendEmailSender:
        return cls(
            api_key=settings.resend_api_key,
            sender=settings.email_from,
            api_url=settings.resend_api_url,
        )

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def send(self, to_email: str, subject: str, html: str) -> tuple[bool, str]:
        """
        Send an email via Resend with retry logic.

        Raises EmailNotConfiguredError before any attempt when no API key is
        set. Otherwise returns (success, error_message); error_message is
        empty on success.
        """
        if not self._api_key:
            raise EmailNotConfiguredError("RESEND_API_KEY not configured.")

        payload = {
            "from": self._sender,
            "to": [to_email],
            "subject": subject,
            "html": html,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        error = ""

        for attempt in range(1, MAX_RETRIES + 1):
            try:
                response = self._session.post(
                    self._api_url, json=payload, headers=headers, timeout=self._timeout
                )
            except requests.RequestException as exc:
                error = f"Transport error (attempt {attempt}): {exc}"
                logger.warning(error)
                if attempt < MAX_RETRIES:
                    time.sleep(RETRY_DELAY_SECONDS)
                continue

            if response.ok:
                logger.info("Email sent to %s (attempt %d)", to_email, attempt)
                return True, ""

            error = f"Resend error: {response.status_code} {response.text}"
            if 400 <= response.status_code < 500:
                logger.error(error)
                return False, error  # No retry for client errors

            logger.warning("%s (attempt %d)", error, attempt)
            if attempt < MAX_RETRIES:
                time.sleep(RETRY_DELAY_SECONDS)

        final_error = f"Failed to send to {to_email} after {MAX_RETRIES} attempts: {error}"
        logger.error(final_error)
        return False, final_error
