"""Feed fetching over HTTP — never raises, returns None on any failure."""

from __future__ import annotations

import codecs
import logging
import re

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_USER_AGENT = "web3-job-bot/1.0"
DEFAULT_ENCODING = "utf-8"

_XML_DECLARED_ENCODING = re.compile(
    rb"""^\s*<\?xml[^>]*\bencoding\s*=\s*["']([A-Za-z0-9._-]+)["']"""
)


def _declared_encoding(content: bytes) -> str:
    """Encoding named in the ``<?xml ...?>`` declaration, else UTF-8."""
    match = _XML_DECLARED_ENCODING.match(content[:200])
    if match:
        name = match.group(1).decode("ascii")
        try:
            return codecs.lookup(name).name
        except LookupError:
            logger.debug("Unknown declared encoding %r, using UTF-8", name)
    return DEFAULT_ENCODING


def decode_body(response: requests.Response) -> str:
    """
    Decode a feed response body.

    A charset in the Content-Type header wins. Without one, requests assumes
    ISO-8859-1 for ``text/*``, which garbles UTF-8 feeds, so the XML
    declaration (or UTF-8) is used instead.
    """
    content_type = response.headers.get("Content-Type") or ""
    if "charset" in content_type.lower():
        return response.text
    content = response.content
    return content.decode(_declared_encoding(content), errors="replace")


def fetch_feed(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
    session: requests.Session | None = None,
) -> str | None:
    """
    Download the raw feed document at *url*.

    Network errors, timeouts and non-2xx responses are logged and reported
    as None. Callers treat None exactly like a feed with zero items.
    """
    http = session or requests
    try:
        response = http.get(url, timeout=timeout, headers={"User-Agent": user_agent})
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Fetch error %s: %s", url, exc)
        return None

    logger.debug("Fetched %s (%d bytes)", url, len(response.content))
    return decode_body(response)
