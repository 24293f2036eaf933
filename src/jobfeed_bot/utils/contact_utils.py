"""Pure contact extraction utilities.

Finds an email address or a Telegram handle inside free posting text.
No network calls — just regex matching.
"""

from __future__ import annotations

import re

# RFC-5322 simplified: local@domain.tld (2+ char TLD, no consecutive dots)
EMAIL_REGEX: re.Pattern[str] = re.compile(
    r"^[a-zA-Z0-9._%+-]+@(?!.*\.\.)[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

# Same shape, unanchored, for scanning prose
_EMAIL_IN_TEXT: re.Pattern[str] = re.compile(
    r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"
)

# "@handle" not preceded by a word char, so emails are not picked up
_TELEGRAM_HANDLE: re.Pattern[str] = re.compile(r"(?<![\w.])@([a-zA-Z0-9_]{4,})")


def validate_email(email: str) -> bool:
    """Return True if *email* matches the simplified RFC-5322 pattern."""
    if not email or not isinstance(email, str):
        return False
    return EMAIL_REGEX.match(email.strip()) is not None


def extract_email(text: str) -> str | None:
    """Return the first email address found in *text*, or None."""
    if not text or not isinstance(text, str):
        return None
    match = _EMAIL_IN_TEXT.search(text)
    return match.group(0) if match else None


def find_telegram_handle(text: str) -> str | None:
    """Return the first ``@handle`` (without the ``@``) in *text*, or None."""
    if not text or not isinstance(text, str):
        return None
    match = _TELEGRAM_HANDLE.search(text)
    return match.group(1) if match else None
