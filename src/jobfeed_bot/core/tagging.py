"""Fixed-taxonomy tag detection."""

from __future__ import annotations

from collections.abc import Iterable

from jobfeed_bot.config.defaults import TAG_SEPARATOR, TAG_TAXONOMY


def detect_tags(text: str) -> tuple[str, ...]:
    """
    Return taxonomy labels whose triggers occur in *text*.

    Matching is case-insensitive substring search. Labels come back in
    taxonomy declaration order, each at most once, no matter where or how
    often the triggers appear.
    """
    if not text:
        return ()
    lowered = text.lower()
    return tuple(
        label
        for triggers, label in TAG_TAXONOMY
        if any(trigger in lowered for trigger in triggers)
    )


def render_tags(labels: Iterable[str]) -> str:
    """Join labels for storage and display (``"React, Web3"``)."""
    return TAG_SEPARATOR.join(labels)
