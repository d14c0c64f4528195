"""Copy upcoming Google Calendar events and link them to contacts."""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.core.event_linking import link_event_to_contacts
from outreach.models.calendar_event import CalendarEvent
from outreach.models.contact import Contact
from outreach.services.google_calendar import get_upcoming_events, parse_calendar_event

logger = logging.getLogger(__name__)

# How far ahead a sync looks
SYNC_DAYS = 30


@dataclass
class CalendarSyncResult:
    """Outcome of a calendar sync."""

    total: int
    synced: int = 0
    new_events: list[dict[str, Any]] = field(default_factory=list)


async def sync_calendar_events(db: AsyncSession, days: int = SYNC_DAYS) -> CalendarSyncResult:
    """
    Upsert the next ``days`` of events by Google event id.

    Each stored event keeps the ids of the contacts among its attendees.
    Only events seen for the first time are listed in ``new_events``.
    """
    result = await db.execute(select(Contact).order_by(Contact.id))
    contacts = [c.to_dict() for c in result.scalars().all()]

    raw_events = await get_upcoming_events(db, days)
    parsed = [parse_calendar_event(e) for e in raw_events]

    result = await db.execute(
        select(CalendarEvent).where(
            CalendarEvent.google_event_id.in_([e["google_event_id"] for e in parsed])
        )
    )
    stored = {e.google_event_id: e for e in result.scalars().all()}

    sync = CalendarSyncResult(total=len(raw_events))
    for event in parsed:
        if event["start_time"] is None:
            logger.warning(f"Skipping calendar event {event['google_event_id']} with no start")
            continue

        contact_ids = [c["id"] for c in link_event_to_contacts(event["attendee_emails"], contacts)]
        values = {
            "summary": event["summary"],
            "description": event["description"],
            "location": event["location"],
            "meeting_url": event["meeting_url"],
            "start_time": event["start_time"],
            "end_time": event["end_time"],
            "is_all_day": event["is_all_day"],
            "related_contact_ids": contact_ids,
        }

        existing = stored.get(event["google_event_id"])
        if existing:
            for key, value in values.items():
                setattr(existing, key, value)
        else:
            row = CalendarEvent(google_event_id=event["google_event_id"], **values)
            db.add(row)
            stored[row.google_event_id] = row
            sync.new_events.append({**event, "related_contact_ids": contact_ids})

        sync.synced += 1

    await db.commit()
    logger.info(f"Synced {sync.synced} of {sync.total} calendar events")
    return sync
