"""Command-line entry point.

Usage::

    python -m jobfeed_bot poll    # run one poll cycle and exit
    python -m jobfeed_bot serve   # connect the bot and poll on a schedule
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from jobfeed_bot.actions import run_poll_now
from jobfeed_bot.app import create_app
from jobfeed_bot.config import get_settings
from jobfeed_bot.scheduler import connect_with_retry, start_scheduler

logger = logging.getLogger("jobfeed_bot")

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format=_FORMAT, datefmt=_DATE_FMT)


def _poll() -> int:
    ctx = create_app(get_settings())
    try:
        print(run_poll_now(ctx))
    finally:
        ctx.close()
    return 0


def _serve() -> int:
    settings = get_settings()
    if not settings.telegram_bot_token:
        logger.warning("Bot not started because TELEGRAM_BOT_TOKEN is missing.")
        return 1

    ctx = create_app(settings)
    connect_with_retry(ctx.notifier, delay_seconds=settings.bot_retry_delay_seconds)
    scheduler = start_scheduler(ctx)
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        scheduler.shutdown(wait=True)
        ctx.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jobfeed-bot",
        description="Poll job feeds, score postings and notify subscribers.",
    )
    parser.add_argument("command", choices=("poll", "serve"))
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    if args.command == "poll":
        return _poll()
    return _serve()


if __name__ == "__main__":
    sys.exit(main())
