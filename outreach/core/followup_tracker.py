"""Follow-up date tracking for contacts."""

from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.config import get_settings
from outreach.models.contact import Contact, ContactStatus
from outreach.services.settings_store import PENDING_FOLLOWUPS_KEY, set_json_setting

settings = get_settings()

# Status changes that schedule a follow-up
FOLLOWUP_STATUSES = (ContactStatus.INTERESTED, ContactStatus.RESPONDED)
# Status changes that close out any follow-up
CLOSED_STATUSES = (ContactStatus.ACCEPTED, ContactStatus.DECLINED)


def followup_date_for_status(
    status: ContactStatus,
    current: datetime | None,
    now: datetime | None = None,
) -> datetime | None:
    """Next follow-up date implied by moving a contact to ``status``."""
    if status in FOLLOWUP_STATUSES:
        now = now or datetime.utcnow()
        return now + timedelta(days=settings.followup_after_response_days)
    if status in CLOSED_STATUSES:
        return None
    return current


class FollowupTracker:
    """Find contacts whose follow-up date has passed."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_due_contacts(self, as_of: datetime | None = None) -> list[Contact]:
        """Contacts due for follow-up, skipping declined ones."""
        as_of = as_of or datetime.utcnow()
        result = await self.db.execute(
            select(Contact).where(
                and_(
                    Contact.next_followup_date.is_not(None),
                    Contact.next_followup_date <= as_of,
                    Contact.status != ContactStatus.DECLINED,
                )
            ).order_by(Contact.next_followup_date)
        )
        return list(result.scalars().all())

    async def check_followups(self) -> tuple[str, dict[str, Any]]:
        """Store due contacts for the dashboard and report how many were found."""
        now = datetime.utcnow()
        due = await self.get_due_contacts(now)

        if due:
            await set_json_setting(self.db, PENDING_FOLLOWUPS_KEY, {
                "contacts": [
                    {
                        "id": c.id,
                        "name": c.name,
                        "email": c.email,
                        "company": c.company,
                        "next_followup_date": c.next_followup_date.isoformat(),
                        "status": c.status.value,
                    }
                    for c in due
                ],
                "checked_at": now.isoformat(),
            })
            await self.db.commit()
            message = f"Found {len(due)} contacts needing follow-up"
        else:
            message = "No contacts need follow-up at this time"

        return message, {"contacts_found": len(due), "updated": len(due)}
