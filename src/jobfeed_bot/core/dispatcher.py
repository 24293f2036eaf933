"""Fan-out of a newly accepted posting to every recipient."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jobfeed_bot.core.notifier import Notifier
    from jobfeed_bot.storage.base import JobPosting, PostingStore

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Per-recipient outcome of one fan-out."""

    posting_id: int
    delivered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    marked_sent: bool = False


def collect_recipients(subscriber_ids: list[str], owner_id: str) -> list[str]:
    """Subscribers in store order, then the owner; de-duplicated, blanks dropped."""
    candidates = [*subscriber_ids, owner_id]
    return list(dict.fromkeys(str(r).strip() for r in candidates if str(r).strip()))


def dispatch_posting(
    posting: JobPosting,
    *,
    store: PostingStore,
    notifier: Notifier,
    owner_id: str = "",
) -> DispatchResult:
    """
    Deliver *posting* to every known subscriber plus the owner.

    Each recipient is attempted independently: a failure (False or an
    exception) is logged and the loop moves on. Once every recipient has
    been tried, the posting is marked ``sent`` whether or not any delivery
    succeeded.
    """
    result = DispatchResult(posting_id=posting.id)
    recipients = collect_recipients(store.list_subscriber_ids(), owner_id)

    for recipient in recipients:
        try:
            ok = notifier.deliver(posting, recipient)
        except Exception:
            logger.exception(
                "Delivery of posting %d to %s raised", posting.id, recipient
            )
            ok = False

        if ok:
            result.delivered.append(recipient)
        else:
            logger.warning("Delivery of posting %d to %s failed", posting.id, recipient)
            result.failed.append(recipient)

    # Mark as sent globally, even when every delivery failed
    result.marked_sent = store.update_status(posting.id, "sent")
    logger.info(
        "Posting %d dispatched: %d delivered, %d failed",
        posting.id,
        len(result.delivered),
        len(result.failed),
    )
    return result
