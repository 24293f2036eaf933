"""Utility functions for text cleanup and contact extraction."""

from jobfeed_bot.utils.contact_utils import (
    extract_email,
    find_telegram_handle,
    validate_email,
)
from jobfeed_bot.utils.text_utils import (
    clean_excerpt,
    clean_whitespace,
    decode_entities,
    strip_html_markdown,
    truncate_chars,
    unwrap_cdata,
)

__all__ = [
    "clean_excerpt",
    "clean_whitespace",
    "decode_entities",
    "extract_email",
    "find_telegram_handle",
    "strip_html_markdown",
    "truncate_chars",
    "unwrap_cdata",
    "validate_email",
]
