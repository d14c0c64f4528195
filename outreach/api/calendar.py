"""Calendar event linking and sync API endpoints."""

from datetime import datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.services.database import get_db
from outreach.services.google_calendar import CalendarError
from outreach.services.google_sheets import GoogleNotConnectedError
from outreach.models.calendar_event import CalendarEvent
from outreach.models.contact import Contact
from outreach.core.calendar_sync import sync_calendar_events
from outreach.core.event_linking import (
    calculate_event_priority,
    is_affiliate_related,
    link_event_to_contacts,
)
from outreach.schemas.calendar import (
    CalendarEventListResponse,
    CalendarEventResponse,
    CalendarSyncResponse,
    EventLinkRequest,
    EventLinkResponse,
    LinkedContact,
    SyncedEvent,
)

router = APIRouter()


@router.post("/link", response_model=EventLinkResponse)
async def link_event(
    event: EventLinkRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EventLinkResponse:
    """Link a calendar event to contacts and score its relevance."""
    result = await db.execute(select(Contact).order_by(Contact.id))
    contacts = [c.to_dict() for c in result.scalars().all()]

    linked = link_event_to_contacts(event.attendee_emails, contacts)
    relation = is_affiliate_related(
        event.summary, event.description, event.attendee_emails, contacts
    )

    return EventLinkResponse(
        is_related=relation.is_related,
        reason=relation.reason,
        contact_ids=[c["id"] for c in linked],
        linked_contacts=[
            LinkedContact(id=c["id"], name=c.get("name"), email=c.get("email"))
            for c in linked
        ],
        priority_score=calculate_event_priority(
            event.summary,
            event.description,
            event.attendee_emails,
            contacts,
            event.start_time,
        ),
    )


@router.post("/events", response_model=CalendarSyncResponse)
async def sync_events(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CalendarSyncResponse:
    """Sync the next 30 days of Google Calendar events."""
    try:
        result = await sync_calendar_events(db)
    except GoogleNotConnectedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except CalendarError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return CalendarSyncResponse(
        synced=result.synced,
        total=result.total,
        events=[SyncedEvent(**event) for event in result.new_events],
    )


@router.get("/events", response_model=CalendarEventListResponse)
async def list_events(
    db: Annotated[AsyncSession, Depends(get_db)],
    days: int = Query(7, ge=1, le=365),
) -> CalendarEventListResponse:
    """Stored events starting between now and ``days`` ahead, soonest first."""
    now = datetime.utcnow()
    result = await db.execute(
        select(CalendarEvent)
        .where(CalendarEvent.start_time >= now)
        .where(CalendarEvent.start_time <= now + timedelta(days=days))
        .order_by(CalendarEvent.start_time)
    )
    events = result.scalars().all()

    contact_ids = {cid for e in events for cid in (e.related_contact_ids or [])}
    contacts: dict[int, Contact] = {}
    if contact_ids:
        result = await db.execute(select(Contact).where(Contact.id.in_(sorted(contact_ids))))
        contacts = {c.id: c for c in result.scalars().all()}

    responses = []
    for event in events:
        related = event.related_contact_ids or []
        responses.append(CalendarEventResponse(
            id=event.id,
            google_event_id=event.google_event_id,
            summary=event.summary,
            description=event.description,
            location=event.location,
            meeting_url=event.meeting_url,
            start_time=event.start_time,
            end_time=event.end_time,
            is_all_day=event.is_all_day,
            related_contact_ids=related,
            contacts=[
                LinkedContact(
                    id=contacts[cid].id,
                    name=contacts[cid].name,
                    email=contacts[cid].email,
                    company=contacts[cid].company,
                )
                for cid in related
                if cid in contacts
            ],
        ))

    return CalendarEventListResponse(events=responses)
