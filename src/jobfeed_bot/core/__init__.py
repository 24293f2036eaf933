"""Core business logic modules."""

from jobfeed_bot.core.dispatcher import dispatch_posting
from jobfeed_bot.core.email_sender import ResendEmailSender
from jobfeed_bot.core.fetcher import fetch_feed
from jobfeed_bot.core.notifier import TelegramNotifier
from jobfeed_bot.core.outreach import build_template, draft_outreach_email
from jobfeed_bot.core.parser import FeedItem, parse_items
from jobfeed_bot.core.reporter import CycleStats, build_cycle_summary
from jobfeed_bot.core.scorer import is_admissible, score_posting
from jobfeed_bot.core.tagging import detect_tags, render_tags

__all__ = [
    "CycleStats",
    "FeedItem",
    "ResendEmailSender",
    "TelegramNotifier",
    "build_cycle_summary",
    "build_template",
    "detect_tags",
    "dispatch_posting",
    "draft_outreach_email",
    "fetch_feed",
    "is_admissible",
    "parse_items",
    "render_tags",
    "score_posting",
]
