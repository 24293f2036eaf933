"""Pure text manipulation utilities.

HTML/Markdown stripping, whitespace cleanup, and truncation for feed excerpts.
No external dependencies — stdlib only.
"""

from __future__ import annotations

import html
import re

# Pre-compiled patterns for strip_html_markdown
_HTML_TAG = re.compile(r"<[^>]+>")
_MD_BOLD = re.compile(r"\*\*(.+?)\*\*")
_MD_CODE = re.compile(r"`(.+?)`")
_MD_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_MD_HEADING = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_MULTI_SPACE = re.compile(r"[ \t]+")
_ANY_WHITESPACE = re.compile(r"\s+")
_MULTI_NEWLINE = re.compile(r"\n{3,}")
_CDATA = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)


def unwrap_cdata(text: str) -> str:
    """Replace ``<![CDATA[...]]>`` sections with their raw content."""
    if not text or not isinstance(text, str):
        return ""
    return _CDATA.sub(lambda m: m.group(1), text)


def decode_entities(text: str) -> str:
    """Unescape HTML character references (``&amp;``, ``&#39;`` ...)."""
    if not text or not isinstance(text, str):
        return ""
    return html.unescape(text)


def strip_html_markdown(text: str) -> str:
    """Remove HTML tags and Markdown formatting, collapse whitespace.

    Preserves paragraph breaks (double newlines) but collapses triple+.
    """
    if not text or not isinstance(text, str):
        return ""

    result = _HTML_TAG.sub(" ", text)
    result = _MD_BOLD.sub(r"\1", result)
    result = _MD_CODE.sub(r"\1", result)
    result = _MD_LINK.sub(r"\1", result)
    result = _MD_HEADING.sub("", result)
    result = _MULTI_SPACE.sub(" ", result)
    result = _MULTI_NEWLINE.sub("\n\n", result)
    return result.strip()


def clean_whitespace(text: str) -> str:
    """Collapse every whitespace run (newlines included) to one space."""
    if not text or not isinstance(text, str):
        return ""
    return _ANY_WHITESPACE.sub(" ", text).strip()


def truncate_chars(text: str, max_chars: int, suffix: str = "...") -> str:
    """Cut *text* to *max_chars* and append *suffix*.

    The suffix is always appended to non-empty text so callers get a
    consistent "continues" marker, matching how excerpts are displayed.
    """
    if not text or not isinstance(text, str):
        return ""
    if max_chars < 1:
        return ""
    return text[:max_chars].rstrip() + suffix


def clean_excerpt(text: str, max_chars: int) -> str:
    """Flatten a feed description into a single-line, tag-free excerpt."""
    cleaned = clean_whitespace(strip_html_markdown(decode_entities(text)))
    return truncate_chars(cleaned, max_chars)
