"""Pick the contacts to reach out to each day."""

import logging
from datetime import date, datetime

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.models.blocklist import BlocklistEntry
from outreach.models.contact import Contact, ContactStatus, ContactPriority
from outreach.models.daily_queue import DailyQueueItem, QueueState

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 150

PRIORITY_RANK = {
    ContactPriority.HIGH: 0,
    ContactPriority.MEDIUM: 1,
    ContactPriority.LOW: 2,
}


class QueueItemNotFoundError(Exception):
    """Referenced queue entry does not exist."""


def today_utc() -> date:
    return datetime.utcnow().date()


async def blocked_names(db: AsyncSession) -> set[str]:
    """Lowercased blocklist names."""
    result = await db.execute(select(BlocklistEntry.name))
    return {name.lower() for name in result.scalars().all()}


def rank_candidates(contacts: list[Contact], blocked: set[str], limit: int) -> list[Contact]:
    """
    Order fresh contacts for the queue.

    Blocked names and emails are dropped. Contacts with an email come first,
    then higher priority, then the most recently added.
    """
    allowed = [
        c for c in contacts
        if c.name.lower() not in blocked
        and not (c.email and c.email.lower() in blocked)
    ]
    allowed.sort(key=lambda c: (c.created_at or datetime.min, c.id), reverse=True)
    allowed.sort(key=lambda c: (not c.email, PRIORITY_RANK.get(c.priority, 1)))
    return allowed[:limit]


async def generate_queue(
    db: AsyncSession,
    limit: int = DEFAULT_QUEUE_SIZE,
    queue_date: date | None = None,
) -> list[DailyQueueItem]:
    """Replace the queue for ``queue_date`` with fresh, unblocked new contacts."""
    queue_date = queue_date or today_utc()

    await db.execute(delete(DailyQueueItem).where(DailyQueueItem.queue_date == queue_date))

    result = await db.execute(select(Contact).where(Contact.status == ContactStatus.NEW))
    picked = rank_candidates(list(result.scalars().all()), await blocked_names(db), limit)

    items = [
        DailyQueueItem(queue_date=queue_date, contact_id=c.id, state=QueueState.PENDING)
        for c in picked
    ]
    db.add_all(items)
    await db.commit()

    logger.info(f"Generated daily queue for {queue_date} with {len(items)} contacts")
    return items


async def queue_stats(db: AsyncSession, queue_date: date) -> dict[str, int]:
    """Entry counts per state, plus the total."""
    result = await db.execute(
        select(DailyQueueItem.state, func.count())
        .where(DailyQueueItem.queue_date == queue_date)
        .group_by(DailyQueueItem.state)
    )
    counts = {state.value: 0 for state in QueueState}
    for state, count in result.all():
        counts[QueueState(state).value] = count
    counts["total"] = sum(counts.values())
    return counts


async def set_queue_state(
    db: AsyncSession,
    queue_id: int,
    state: QueueState,
) -> tuple[DailyQueueItem, Contact]:
    """
    Move a queue entry to ``state``.

    Marking an entry contacted also moves its contact to contacted and
    records the first contact date if none is set yet.
    """
    result = await db.execute(
        select(DailyQueueItem, Contact)
        .join(Contact, Contact.id == DailyQueueItem.contact_id)
        .where(DailyQueueItem.id == queue_id)
    )
    row = result.one_or_none()
    if row is None:
        raise QueueItemNotFoundError(f"Queue item {queue_id} not found")
    item, contact = row

    item.state = state
    if state == QueueState.CONTACTED:
        contact.status = ContactStatus.CONTACTED
        if contact.first_contact_date is None:
            contact.first_contact_date = datetime.utcnow()

    await db.commit()
    await db.refresh(item)
    await db.refresh(contact)
    return item, contact
