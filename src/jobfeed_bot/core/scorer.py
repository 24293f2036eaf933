"""Heuristic relevance scoring and the admission gate."""

from __future__ import annotations

from collections.abc import Iterable

from jobfeed_bot.config.defaults import (
    DOMAIN_MATCH_WEIGHT,
    ENGAGEMENT_TERMS,
    ENGAGEMENT_WEIGHT,
    FRONTEND_TERMS,
    KEYWORD_WEIGHT,
    SENIORITY_TERM,
    SENIORITY_WEIGHT,
    WEB3_TERMS,
    WEBSITE_TERMS,
    WEBSITE_WEIGHT,
)


def _contains_any(text: str, terms: Iterable[str]) -> bool:
    return any(term in text for term in terms)


def score_posting(
    title: str,
    excerpt: str,
    tags: str,
    keywords: Iterable[str],
) -> float:
    """
    Score a posting from its title, excerpt and rendered tags.

    Rules (all case-insensitive substring checks on the joined text):
    1. +1 per configured keyword present (each keyword counted once)
    2. +3 when a web3 term AND a frontend term are both present
    3. +2 for "website" / "landing page"
    4. +2 for "contract" / "freelance" / "short-term" / "bounty"
    5. +0.5 for "senior"

    Pure: the same inputs always give the same score.
    """
    text = f"{title or ''} {excerpt or ''} {tags or ''}".lower()
    score = 0.0

    for kw in dict.fromkeys(k.strip().lower() for k in keywords):
        if kw and kw in text:
            score += KEYWORD_WEIGHT

    if _contains_any(text, WEB3_TERMS) and _contains_any(text, FRONTEND_TERMS):
        score += DOMAIN_MATCH_WEIGHT
    if _contains_any(text, WEBSITE_TERMS):
        score += WEBSITE_WEIGHT
    if _contains_any(text, ENGAGEMENT_TERMS):
        score += ENGAGEMENT_WEIGHT
    if SENIORITY_TERM in text:
        score += SENIORITY_WEIGHT

    return score


def is_admissible(score: float) -> bool:
    """Only postings scoring above zero are ever persisted."""
    return score > 0
