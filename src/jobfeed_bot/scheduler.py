"""Process-level scheduling: connect the bot, then poll on a fixed interval."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Protocol

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

if TYPE_CHECKING:
    from jobfeed_bot.app import AppContext

logger = logging.getLogger(__name__)

POLL_JOB_ID = "poll_feeds"


class Connectable(Protocol):
    def check_connection(self) -> bool: ...


def connect_with_retry(
    client: Connectable,
    *,
    delay_seconds: float,
    max_attempts: int | None = None,
) -> bool:
    """
    Probe *client* until it answers, sleeping a fixed delay between tries.

    Retries forever when *max_attempts* is None. Returns False only when the
    attempts run out.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            if client.check_connection():
                return True
        except Exception:
            logger.exception("Bot connection attempt %d raised", attempt)

        if max_attempts is not None and attempt >= max_attempts:
            logger.error("Bot connection failed after %d attempts", attempt)
            return False
        logger.warning("Bot connection failed — retrying in %.0fs", delay_seconds)
        time.sleep(delay_seconds)


def start_scheduler(
    ctx: AppContext,
    scheduler: BackgroundScheduler | None = None,
) -> BackgroundScheduler:
    """
    Run one poll cycle now, then schedule it every ``poll_interval_seconds``.

    The interval job is single-instance and coalesced; PollCycle's own lock
    still guards against overlap with on-demand triggers.
    """
    ctx.poll_cycle.run()

    sched = scheduler or BackgroundScheduler()
    sched.add_job(
        ctx.poll_cycle.run,
        trigger=IntervalTrigger(seconds=ctx.settings.poll_interval_seconds),
        id=POLL_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    sched.start()
    logger.info(
        "Scheduler started: polling %d feeds every %ds",
        len(ctx.settings.rss_feeds),
        ctx.settings.poll_interval_seconds,
    )
    return sched
