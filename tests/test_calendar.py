"""Test calendar event linking and sync endpoints."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.models.calendar_event import CalendarEvent
from outreach.models.contact import Contact
from outreach.services.google_calendar import CalendarError
from outreach.services.google_sheets import GoogleNotConnectedError


@pytest.mark.asyncio
async def test_link_event(client: AsyncClient, db_session: AsyncSession):
    """Attendees are matched to stored contacts."""
    contact = Contact(name="Ann Roe", email="ann@roe.io")
    db_session.add(contact)
    await db_session.commit()
    await db_session.refresh(contact)

    start = datetime.now(timezone.utc) + timedelta(hours=3)
    response = await client.post("/api/v1/calendar/link", json={
        "summary": "Sponsorship sync",
        "attendee_emails": ["ANN@roe.io", "me@self.com"],
        "start_time": start.isoformat(),
    })

    assert response.status_code == 200
    data = response.json()
    assert data["is_related"] is True
    assert data["reason"] == "Meeting with 1 contact: Ann Roe"
    assert data["contact_ids"] == [contact.id]
    assert data["linked_contacts"][0]["email"] == "ann@roe.io"
    # contact 40, sponsor keyword 20, within a day 10
    assert data["priority_score"] == 70


@pytest.mark.asyncio
async def test_link_unrelated_event(client: AsyncClient):
    response = await client.post("/api/v1/calendar/link", json={
        "summary": "Dentist",
        "start_time": "2020-01-01T10:00:00Z",
    })

    data = response.json()
    assert data["is_related"] is False
    assert data["contact_ids"] == []
    assert data["priority_score"] == 0


# =============================================================================
# CALENDAR SYNC
# =============================================================================

def google_event(event_id: str, summary: str, start: datetime, attendees=()) -> dict:
    """An event as returned by the Calendar API."""
    return {
        "id": event_id,
        "summary": summary,
        "description": "Agenda: https://meet.google.com/abc-defg-hij",
        "start": {"dateTime": start.isoformat() + "Z"},
        "end": {"dateTime": (start + timedelta(minutes=30)).isoformat() + "Z"},
        "attendees": [{"email": email} for email in attendees],
    }


def patch_calendar(events=None, error=None):
    return patch(
        "outreach.core.calendar_sync.get_upcoming_events",
        new=AsyncMock(return_value=events, side_effect=error),
    )


async def create_contact(db: AsyncSession, name: str, email: str) -> Contact:
    contact = Contact(name=name, email=email, company="Roe Partners")
    db.add(contact)
    await db.commit()
    await db.refresh(contact)
    return contact


@pytest.mark.asyncio
async def test_sync_events_links_contacts(client: AsyncClient, db_session: AsyncSession):
    contact = await create_contact(db_session, "Ann Roe", "ann@roe.io")
    start = datetime(2030, 5, 1, 15, 0)
    events = [
        google_event("evt-1", "Sponsor call", start, attendees=["ANN@roe.io", "me@self.com"]),
        google_event("evt-2", "Dentist", start + timedelta(days=1)),
    ]

    with patch_calendar(events):
        response = await client.post("/api/v1/calendar/events")

    assert response.status_code == 200
    data = response.json()
    assert data["synced"] == 2
    assert data["total"] == 2
    assert [e["google_event_id"] for e in data["events"]] == ["evt-1", "evt-2"]
    assert data["events"][0]["related_contact_ids"] == [contact.id]
    assert data["events"][0]["meeting_url"] == "https://meet.google.com/abc-defg-hij"

    result = await db_session.execute(
        select(CalendarEvent).where(CalendarEvent.google_event_id == "evt-1")
    )
    stored = result.scalar_one()
    assert stored.start_time == start
    assert stored.related_contact_ids == [contact.id]


@pytest.mark.asyncio
async def test_sync_events_updates_existing(client: AsyncClient, db_session: AsyncSession):
    """A second sync updates events in place instead of duplicating them."""
    start = datetime(2030, 5, 1, 15, 0)

    with patch_calendar([google_event("evt-1", "Intro", start)]):
        await client.post("/api/v1/calendar/events")
    with patch_calendar([google_event("evt-1", "Intro (moved)", start + timedelta(hours=2))]):
        response = await client.post("/api/v1/calendar/events")

    data = response.json()
    assert data["synced"] == 1
    assert data["events"] == []

    result = await db_session.execute(select(CalendarEvent))
    events = result.scalars().all()
    assert len(events) == 1
    await db_session.refresh(events[0])
    assert events[0].summary == "Intro (moved)"
    assert events[0].start_time == start + timedelta(hours=2)


@pytest.mark.asyncio
async def test_sync_events_google_not_connected(client: AsyncClient):
    with patch_calendar(error=GoogleNotConnectedError("Google account not connected. Please re-authenticate.")):
        response = await client.post("/api/v1/calendar/events")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_sync_events_calendar_failure(client: AsyncClient):
    with patch_calendar(error=CalendarError("Failed to fetch calendar events")):
        response = await client.post("/api/v1/calendar/events")

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to fetch calendar events"


@pytest.mark.asyncio
async def test_list_events_window(client: AsyncClient, db_session: AsyncSession):
    """Only events starting within the window are listed, soonest first."""
    contact = await create_contact(db_session, "Ann Roe", "ann@roe.io")
    now = datetime.utcnow()
    db_session.add_all([
        CalendarEvent(
            google_event_id="later",
            summary="Later this week",
            start_time=now + timedelta(days=3),
            related_contact_ids=[contact.id, 9999],
        ),
        CalendarEvent(google_event_id="soon", summary="Soon", start_time=now + timedelta(hours=2)),
        CalendarEvent(google_event_id="past", summary="Past", start_time=now - timedelta(days=1)),
        CalendarEvent(google_event_id="far", summary="Far", start_time=now + timedelta(days=20)),
    ])
    await db_session.commit()

    response = await client.get("/api/v1/calendar/events")

    assert response.status_code == 200
    events = response.json()["events"]
    assert [e["google_event_id"] for e in events] == ["soon", "later"]
    assert events[1]["contacts"] == [
        {"id": contact.id, "name": "Ann Roe", "email": "ann@roe.io", "company": "Roe Partners"}
    ]
    assert events[0]["contacts"] == []

    response = await client.get("/api/v1/calendar/events", params={"days": 30})
    assert len(response.json()["events"]) == 3
