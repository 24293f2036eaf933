"""Poll cycle — fetch, parse, score, store and dispatch for every feed."""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from jobfeed_bot.core.dispatcher import dispatch_posting
from jobfeed_bot.core.fetcher import fetch_feed
from jobfeed_bot.core.parser import FeedItem, parse_items
from jobfeed_bot.core.reporter import CycleStats, build_cycle_summary
from jobfeed_bot.core.scorer import is_admissible, score_posting
from jobfeed_bot.core.tagging import detect_tags, render_tags
from jobfeed_bot.storage.base import NewPosting
from jobfeed_bot.utils.text_utils import clean_whitespace, strip_html_markdown

if TYPE_CHECKING:
    from jobfeed_bot.app import AppContext

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"


class PollCycle:
    """One pass over every configured feed, guarded against overlap.

    ``run`` may be called from the scheduler thread and from an on-demand
    trigger at the same time; only one pass runs, the other returns None.
    """

    def __init__(self, ctx: AppContext) -> None:
        self.ctx = ctx
        self._in_flight = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._in_flight.locked()

    def run(self) -> CycleStats | None:
        """Execute one cycle. Returns its stats, or None if one is in flight."""
        if not self._in_flight.acquire(blocking=False):
            logger.warning("Poll cycle already running — skipping this trigger.")
            return None
        try:
            return self._run_locked()
        finally:
            self._in_flight.release()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_locked(self) -> CycleStats:
        start = time.monotonic()
        stats = CycleStats()
        feeds = self.ctx.settings.rss_feeds
        logger.info("Poll cycle started (%d feeds)", len(feeds))

        for feed in feeds:
            stats.feeds += 1
            try:
                self._process_feed(feed, stats)
            except Exception:
                logger.exception("Unexpected error processing feed %s", feed)
                stats.feeds_failed += 1

        stats.duration_seconds = time.monotonic() - start
        logger.info(build_cycle_summary(stats))
        return stats

    def _process_feed(self, feed: str, stats: CycleStats) -> None:
        settings = self.ctx.settings
        raw = fetch_feed(
            feed,
            timeout=settings.fetch_timeout_seconds,
            user_agent=settings.user_agent,
        )
        if raw is None:
            stats.feeds_failed += 1
            return

        items = parse_items(raw)
        logger.info("  → %d items from %s", len(items), feed)
        for item in items:
            stats.items += 1
            self._process_item(feed, item, stats)

    def _process_item(self, feed: str, item: FeedItem, stats: CycleStats) -> None:
        if not item.link:
            stats.skipped_no_link += 1
            return

        title = item.title or UNTITLED
        excerpt = clean_whitespace(strip_html_markdown(item.description))
        tags = render_tags(detect_tags(f"{title} {excerpt}"))
        score = score_posting(title, excerpt, tags, self.ctx.settings.keywords)

        if not is_admissible(score):
            logger.debug("Rejected (score %.1f): %s", score, title)
            stats.rejected += 1
            return

        posting = self.ctx.store.insert_if_new(
            NewPosting(
                source=feed,
                title=title,
                company="",
                link=item.link,
                excerpt=excerpt,
                tags=tags,
                posted_at=item.published_at,
                score=score,
            )
        )
        if posting is None:
            stats.known += 1
            return

        stats.accepted += 1
        logger.info("New posting %d (score %.1f): %s", posting.id, score, title)
        result = dispatch_posting(
            posting,
            store=self.ctx.store,
            notifier=self.ctx.notifier,
            owner_id=self.ctx.settings.owner_telegram_id,
        )
        stats.deliveries += len(result.delivered)
        stats.delivery_failures += len(result.failed)
