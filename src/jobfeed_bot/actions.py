"""Interactive actions — thin wrappers over store and core operations.

Any front end (chat commands, callback buttons, a CLI) calls these with an
``AppContext``; none of them parse commands or render keyboards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from jobfeed_bot.config.defaults import FALLBACK_REQUESTER
from jobfeed_bot.core.outreach import build_template, draft_outreach_email, to_email_html
from jobfeed_bot.core.reporter import build_cycle_summary
from jobfeed_bot.exceptions import EmailNotConfiguredError
from jobfeed_bot.utils.contact_utils import (
    extract_email,
    find_telegram_handle,
    validate_email,
)

if TYPE_CHECKING:
    from jobfeed_bot.app import AppContext
    from jobfeed_bot.storage.base import JobPosting, Subscriber

logger = logging.getLogger(__name__)

NEWEST_LIMIT = 10


@dataclass(frozen=True)
class ContactOptions:
    """Ways to reach the poster of a job."""

    posting_id: int
    title: str
    apply_link: str
    email: str = ""
    telegram_handle: str = ""
    can_email: bool = False

    @property
    def telegram_url(self) -> str:
        return f"https://t.me/{self.telegram_handle}" if self.telegram_handle else ""


@dataclass(frozen=True)
class EmailOutcome:
    """Result of an outreach email request, phrased for the requester."""

    sent: bool
    message: str
    config_error: bool = False


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _requester_name(ctx: AppContext, requester_name: str) -> str:
    return ctx.settings.my_name or requester_name or FALLBACK_REQUESTER


def _not_configured(job_id: int, exc: EmailNotConfiguredError) -> EmailOutcome:
    logger.warning("Outreach email for posting %d not sent: %s", job_id, exc)
    return EmailOutcome(
        sent=False, message=f"Email not configured: {exc}", config_error=True
    )


def _portfolio_for(ctx: AppContext, external_id: str | None) -> str:
    """Subscriber's own portfolio when set, else the configured one."""
    if external_id:
        subscriber = ctx.store.get_subscriber(external_id)
        if subscriber and subscriber.portfolio:
            return subscriber.portfolio
    return ctx.settings.portfolio_url


# ---------------------------------------------------------------------------
# Subscribers
# ---------------------------------------------------------------------------


def register_subscriber(ctx: AppContext, external_id: str) -> Subscriber | None:
    """First-contact registration; safe to call repeatedly."""
    return ctx.store.ensure_subscriber(
        external_id, portfolio=ctx.settings.portfolio_url
    )


def set_portfolio(ctx: AppContext, external_id: str, url: str) -> bool:
    """Store a portfolio URL, registering the subscriber if needed."""
    url = url.strip()
    if not url:
        return False
    if ctx.store.ensure_subscriber(external_id, portfolio=url) is None:
        return False
    return ctx.store.set_portfolio(external_id, url)


def set_keyword_preferences(ctx: AppContext, external_id: str, keywords: str) -> bool:
    """Store keyword preferences (kept for display, not used in scoring)."""
    if ctx.store.ensure_subscriber(external_id) is None:
        return False
    return ctx.store.set_keyword_preferences(external_id, keywords.strip())


# ---------------------------------------------------------------------------
# Postings
# ---------------------------------------------------------------------------


def list_newest(ctx: AppContext, limit: int = NEWEST_LIMIT) -> list[JobPosting]:
    return ctx.store.list_recent(limit)


def list_saved(ctx: AppContext, external_id: str) -> list[JobPosting]:
    """Postings bookmarked by this subscriber, newest first."""
    subscriber = ctx.store.get_subscriber(external_id)
    if subscriber is None:
        return []
    return ctx.store.list_saved(subscriber.id)


def save(ctx: AppContext, job_id: int, external_id: str) -> bool:
    """Bookmark a posting for a subscriber. Status is left untouched."""
    if ctx.store.get_posting(job_id) is None:
        logger.info("Save requested for unknown posting %d", job_id)
        return False
    subscriber = ctx.store.ensure_subscriber(external_id)
    if subscriber is None:
        return False
    return ctx.store.set_saved_by(job_id, subscriber.id)


def request_outreach(
    ctx: AppContext,
    job_id: int,
    requester_name: str = "",
    external_id: str | None = None,
) -> str | None:
    """Build the outreach template and move the posting to ``contacted``."""
    posting = ctx.store.get_posting(job_id)
    if posting is None:
        return None

    template = build_template(
        posting,
        requester_name=_requester_name(ctx, requester_name),
        skills=ctx.settings.my_skills,
        portfolio_url=_portfolio_for(ctx, external_id),
    )
    ctx.store.update_status(job_id, "contacted")
    return template


def request_contact_options(ctx: AppContext, job_id: int) -> ContactOptions | None:
    """Extract an email address and Telegram handle from the posting text."""
    posting = ctx.store.get_posting(job_id)
    if posting is None:
        return None

    email = extract_email(posting.excerpt or posting.title) or ""
    handle = find_telegram_handle(posting.excerpt) or ""
    return ContactOptions(
        posting_id=posting.id,
        title=posting.title,
        apply_link=posting.link,
        email=email,
        telegram_handle=handle,
        can_email=bool(email) and ctx.settings.email_configured,
    )


def send_outreach_email(
    ctx: AppContext,
    job_id: int,
    target_address: str | None = None,
    requester_name: str = "",
    external_id: str | None = None,
) -> EmailOutcome:
    """
    Email the outreach message for a posting.

    Without *target_address* the first address found in the excerpt is used.
    The posting moves to ``emailed`` only after the provider confirms the
    send; a missing API key is reported as a configuration error.
    """
    posting = ctx.store.get_posting(job_id)
    if posting is None:
        return EmailOutcome(sent=False, message="Job not found.")
    if not ctx.email_sender.configured:
        return _not_configured(
            job_id, EmailNotConfiguredError("RESEND_API_KEY not configured.")
        )

    to = (target_address or "").strip() or extract_email(posting.excerpt)
    if not to:
        return EmailOutcome(
            sent=False,
            message="No email found in job text. Provide an address explicitly.",
        )
    if not validate_email(to):
        return EmailOutcome(sent=False, message=f"Invalid email address: {to}")

    draft = draft_outreach_email(
        posting,
        settings=ctx.settings,
        requester_name=_requester_name(ctx, requester_name),
        portfolio_url=_portfolio_for(ctx, external_id),
    )

    try:
        success, error = ctx.email_sender.send(
            to, draft.subject, to_email_html(draft.body)
        )
    except EmailNotConfiguredError as exc:
        return _not_configured(job_id, exc)

    if not success:
        return EmailOutcome(sent=False, message=f"Failed to send: {error}")

    ctx.store.update_status(job_id, "emailed")
    return EmailOutcome(sent=True, message="Email sent ✅")


# ---------------------------------------------------------------------------
# Polling
# ---------------------------------------------------------------------------


def run_poll_now(ctx: AppContext) -> str:
    """On-demand poll; returns a summary for the requester."""
    stats = ctx.poll_cycle.run()
    if stats is None:
        return "A feed check is already running — try again shortly."
    return build_cycle_summary(stats)
