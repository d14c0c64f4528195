"""Scan the Gmail inbox and keep messages that concern contacts."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.core.email_flagging import requires_action, should_flag_email
from outreach.models.contact import Contact
from outreach.models.flagged_email import FlaggedEmail
from outreach.services.gmail import get_recent_messages

logger = logging.getLogger(__name__)

# Messages pulled from the inbox per scan
SCAN_MESSAGE_COUNT = 50


@dataclass
class NewlyFlagged:
    subject: str
    from_email: str
    reason: str


@dataclass
class ScanResult:
    """Outcome of one inbox scan."""

    scanned: int
    newly_flagged: list[NewlyFlagged] = field(default_factory=list)

    @property
    def flagged(self) -> int:
        return len(self.newly_flagged)


async def scan_inbox(db: AsyncSession, count: int = SCAN_MESSAGE_COUNT) -> ScanResult:
    """
    Flag recent inbox messages from contacts or about partnerships.

    Messages flagged by an earlier scan are skipped, so rescanning the same
    inbox adds nothing. A flagged message from a known contact also moves
    that contact's ``last_contact_date`` to now.
    """
    result = await db.execute(select(Contact).order_by(Contact.id))
    rows = {c.id: c for c in result.scalars().all()}
    contacts = [c.to_dict() for c in rows.values()]

    messages = await get_recent_messages(db, count)

    message_ids = [m["id"] for m in messages]
    result = await db.execute(
        select(FlaggedEmail.gmail_message_id).where(
            FlaggedEmail.gmail_message_id.in_(message_ids)
        )
    )
    seen = set(result.scalars().all())

    scan = ScanResult(scanned=len(messages))
    now = datetime.utcnow()

    for message in messages:
        if message["id"] in seen:
            continue
        seen.add(message["id"])

        text = message["body"] or message["snippet"]
        decision = should_flag_email(message["from_email"], message["subject"], text, contacts)
        if not decision.should_flag:
            continue

        db.add(FlaggedEmail(
            gmail_message_id=message["id"],
            from_email=message["from_email"],
            subject=message["subject"],
            snippet=message["snippet"],
            contact_id=decision.contact_id,
            reason=decision.reason,
            priority=decision.priority,
            is_read=not message["is_unread"],
            action_required=requires_action(message["subject"], text),
            received_at=message["received_at"],
        ))

        if decision.contact_id in rows:
            rows[decision.contact_id].last_contact_date = now

        scan.newly_flagged.append(NewlyFlagged(
            subject=message["subject"],
            from_email=message["from_email"],
            reason=decision.reason,
        ))

    await db.commit()
    logger.info(f"Scanned {scan.scanned} messages, flagged {scan.flagged}")
    return scan
