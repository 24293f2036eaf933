"""Workflows that drive the core pipeline."""

from jobfeed_bot.workflows.poll_cycle import PollCycle

__all__ = ["PollCycle"]
