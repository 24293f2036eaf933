"""Per-cycle counters and the end-of-cycle summary."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CycleStats:
    """Mutable counters filled in while a poll cycle runs."""

    feeds: int = 0
    feeds_failed: int = 0
    items: int = 0
    skipped_no_link: int = 0
    rejected: int = 0
    known: int = 0
    accepted: int = 0
    deliveries: int = 0
    delivery_failures: int = 0
    duration_seconds: float = 0.0


def build_cycle_summary(stats: CycleStats) -> str:
    """Render cycle stats as a short plain-text report."""
    return f"""Poll cycle report
{"=" * 30}
Feeds checked:   {stats.feeds} ({stats.feeds_failed} unavailable)
Items parsed:    {stats.items}
No link:         {stats.skipped_no_link}
Rejected:        {stats.rejected}
Already known:   {stats.known}
New postings:    {stats.accepted}
Deliveries:      {stats.deliveries} ok, {stats.delivery_failures} failed
Duration:        {stats.duration_seconds:.1f}s
"""
