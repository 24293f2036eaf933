"""Outreach message composition with optional LLM drafting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from openai import OpenAI

from jobfeed_bot.config.defaults import (
    EXCERPT_MAX_CHARS,
    FALLBACK_COMPANY,
    FALLBACK_REQUESTER,
    FALLBACK_ROLE,
    OUTREACH_LLM_PROMPT,
    OUTREACH_SUBJECT,
    OUTREACH_TEMPLATE,
    PORTFOLIO_LINE,
)
from jobfeed_bot.utils.text_utils import clean_excerpt, strip_html_markdown

if TYPE_CHECKING:
    from jobfeed_bot.config.settings import Settings
    from jobfeed_bot.storage.base import JobPosting

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutreachDraft:
    """Outreach email ready to send."""

    subject: str
    body: str
    mode: str  # "llm" or "template"


def build_template(
    posting: JobPosting,
    *,
    requester_name: str,
    skills: str,
    portfolio_url: str = "",
) -> str:
    """
    Compose a plain contact message for *posting*.

    Pure string work. Empty company/title fall back to generic wording; an
    empty excerpt drops the "because ..." clause; an empty portfolio URL
    drops the portfolio line.
    """
    name = requester_name.strip() or FALLBACK_REQUESTER
    about = clean_excerpt(posting.excerpt, EXCERPT_MAX_CHARS)
    reason = f" because {about}" if about else "."
    portfolio_line = (
        PORTFOLIO_LINE.format(portfolio_url=portfolio_url) if portfolio_url else ""
    )

    return OUTREACH_TEMPLATE.format(
        greeting_name=posting.company or FALLBACK_COMPANY,
        my_name=name,
        skills=skills,
        role=posting.title or FALLBACK_ROLE,
        reason=reason,
        portfolio_line=portfolio_line,
    )


def build_subject(posting: JobPosting, requester_name: str) -> str:
    return OUTREACH_SUBJECT.format(
        my_name=requester_name.strip() or FALLBACK_REQUESTER,
        role=posting.title or FALLBACK_ROLE,
    )


def to_email_html(text: str) -> str:
    """Render a plain message as the HTML body sent through the email API."""
    return "<pre>" + text.replace("\n", "<br/>") + "</pre>"


def draft_outreach_email(
    posting: JobPosting,
    *,
    settings: Settings,
    requester_name: str,
    portfolio_url: str = "",
) -> OutreachDraft:
    """
    Draft the outreach email for *posting*.

    Uses the LLM when ``outreach_generator_mode`` is "llm", and falls back to
    the fixed template on any failure.
    """
    subject = build_subject(posting, requester_name)

    if settings.outreach_generator_mode == "llm":
        try:
            body = _draft_with_llm(
                posting,
                settings=settings,
                requester_name=requester_name,
                portfolio_url=portfolio_url,
            )
            logger.info("LLM outreach drafted for posting %d", posting.id)
            return OutreachDraft(subject=subject, body=body, mode="llm")
        except Exception:
            logger.exception("LLM drafting failed, using template")

    body = build_template(
        posting,
        requester_name=requester_name,
        skills=settings.my_skills,
        portfolio_url=portfolio_url,
    )
    return OutreachDraft(subject=subject, body=body, mode="template")


def _draft_with_llm(
    posting: JobPosting,
    *,
    settings: Settings,
    requester_name: str,
    portfolio_url: str,
) -> str:
    """Generate the body via an OpenAI-compatible endpoint (OpenRouter)."""
    if not settings.openrouter_api_key:
        raise ValueError("OPENROUTER_API_KEY not configured")

    prompt = OUTREACH_LLM_PROMPT.format(
        my_name=requester_name or FALLBACK_REQUESTER,
        skills=settings.my_skills,
        portfolio_url=portfolio_url or "(none)",
        job_title=posting.title or FALLBACK_ROLE,
        company=posting.company or "unknown",
        job_description=posting.excerpt[:3000],
    )

    client = OpenAI(
        base_url=settings.llm_base_url,
        api_key=settings.openrouter_api_key,
    )
    response = client.chat.completions.create(
        model=settings.llm_model,
        messages=[
            {
                "role": "system",
                "content": (
                    "You write short, friendly outreach messages for freelance "
                    "developers. Plain text only."
                ),
            },
            {"role": "user", "content": prompt},
        ],
        temperature=0.7,
        max_tokens=512,
    )

    raw_text = response.choices[0].message.content or ""
    body = strip_html_markdown(raw_text)
    if not body:
        raise ValueError("LLM returned empty response")
    return body
