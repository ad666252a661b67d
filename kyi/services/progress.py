"""Study progress shared by the vocabulary, grammar and kaiwa views."""

import logging

import aiosqlite

from kyi.auth import StudySession
from kyi.database import upsert_progress, utcnow
from kyi.models import ProgressRecord, ProgressStats

logger = logging.getLogger(__name__)

ITEM_TYPES = ("vocabulary", "grammar", "kaiwa")


async def record_study(db: aiosqlite.Connection, session: StudySession,
                       item_type: str, item_id: str) -> bool:
    """Mark an item as studied for the session's user.

    Returns True when the progress row was written. Logged-out sessions and
    store failures are not errors; they just return False.
    """
    if item_type not in ITEM_TYPES:
        raise ValueError(f"Unknown item type: {item_type}")
    if not session.authenticated:
        logger.debug("Skipping progress for logged-out session (%s %s)", item_type, item_id)
        return False

    try:
        await upsert_progress(db, session.user_id, item_type, item_id, utcnow())
        await db.commit()
    except aiosqlite.Error:
        logger.warning("Could not record %s %s for user %s", item_type, item_id,
                       session.user_id, exc_info=True)
        return False
    return True


def summarize_progress(records: list[ProgressRecord]) -> ProgressStats:
    """Per-type item counts plus total reviews, computed over the fetched rows."""
    return ProgressStats(
        vocabulary=sum(1 for r in records if r.item_type == "vocabulary"),
        grammar=sum(1 for r in records if r.item_type == "grammar"),
        kaiwa=sum(1 for r in records if r.item_type == "kaiwa"),
        totalReviews=sum(r.review_count for r in records),
    )
