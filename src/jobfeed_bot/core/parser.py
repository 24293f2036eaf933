"""Tolerant RSS/Atom item extraction.

This is deliberately a best-effort text scanner, not an XML parser. Feeds in
the wild ship unclosed tags, stray attributes and half-missing fields; one
broken item must degrade to empty strings, never abort the whole document.

Scanning rules:

* Each ``<item ...>`` or ``<entry ...>`` opening tag starts a chunk that runs
  to the next opening tag (document order is preserved).
* A field is read from ``<tag ...>value</tag>``; when the closing tag is
  missing, the text up to the next ``<`` is used instead.
* CDATA wrappers are unwrapped and HTML entities decoded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from jobfeed_bot.utils.text_utils import decode_entities, unwrap_cdata

_ITEM_SPLIT = re.compile(r"<(?:item|entry)\b", re.IGNORECASE)
_LINK_HREF = re.compile(r"<link\b[^>]*?\bhref\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)

TITLE_TAGS: tuple[str, ...] = ("title",)
LINK_TAGS: tuple[str, ...] = ("link", "guid")
DESCRIPTION_TAGS: tuple[str, ...] = ("description", "summary", "content")
PUBLISHED_TAGS: tuple[str, ...] = ("pubDate", "published", "updated")


@dataclass(frozen=True)
class FeedItem:
    """One raw feed entry; every field defaults to an empty string."""

    title: str = ""
    link: str = ""
    description: str = ""
    published_at: str = ""


def _closed_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(
        rf"<{tag}(?:\s[^>]*)?>(.*?)</{tag}\s*>", re.IGNORECASE | re.DOTALL
    )


def _open_pattern(tag: str) -> re.Pattern[str]:
    # Opening tag without a matching close: take text up to the next tag.
    return re.compile(rf"<{tag}(?:\s[^>]*)?(?<!/)>([^<]*)", re.IGNORECASE)


_CLOSED: dict[str, re.Pattern[str]] = {}
_OPEN: dict[str, re.Pattern[str]] = {}
for _tag in (*TITLE_TAGS, *LINK_TAGS, *DESCRIPTION_TAGS, *PUBLISHED_TAGS):
    _CLOSED[_tag] = _closed_pattern(_tag)
    _OPEN[_tag] = _open_pattern(_tag)


def _clean(value: str) -> str:
    return decode_entities(unwrap_cdata(value)).strip()


def _extract_field(chunk: str, tags: tuple[str, ...]) -> str:
    """Return the first non-empty value among *tags*, trying each in order."""
    for tag in tags:
        match = _CLOSED[tag].search(chunk)
        if match:
            value = _clean(match.group(1))
            if value:
                return value
    for tag in tags:
        match = _OPEN[tag].search(chunk)
        if match:
            value = _clean(match.group(1))
            if value:
                return value
    return ""


def _extract_link(chunk: str) -> str:
    link = _extract_field(chunk, ("link",))
    if link:
        return link
    # Atom: <link href="..."/>
    match = _LINK_HREF.search(chunk)
    if match:
        return decode_entities(match.group(1)).strip()
    return _extract_field(chunk, ("guid",))


def parse_item(chunk: str) -> FeedItem:
    """Extract a FeedItem from one item/entry chunk."""
    return FeedItem(
        title=_extract_field(chunk, TITLE_TAGS),
        link=_extract_link(chunk),
        description=_extract_field(chunk, DESCRIPTION_TAGS),
        published_at=_extract_field(chunk, PUBLISHED_TAGS),
    )


def parse_items(raw: str | None) -> list[FeedItem]:
    """
    Split a feed document into items, in document order.

    Returns an empty list for empty input. Items with missing fields are
    still returned (with empty strings); filtering on ``link`` is the
    caller's job.
    """
    if not raw:
        return []
    chunks = _ITEM_SPLIT.split(raw)
    # chunks[0] is the channel header before the first item
    return [parse_item(chunk) for chunk in chunks[1:]]
