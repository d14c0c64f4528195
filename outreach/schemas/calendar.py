"""Calendar event linking and sync schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class EventLinkRequest(BaseModel):
    """Calendar event to link to contacts."""

    summary: str = ""
    description: str = ""
    attendee_emails: list[str] = Field(default_factory=list)
    start_time: datetime


class LinkedContact(BaseModel):
    id: int
    name: str | None = None
    email: str | None = None
    company: str | None = None


class EventLinkResponse(BaseModel):
    """Linked contacts and relevance of an event."""

    is_related: bool
    reason: str
    contact_ids: list[int]
    linked_contacts: list[LinkedContact]
    priority_score: int


class SyncedEvent(BaseModel):
    """An event stored for the first time by a sync."""

    google_event_id: str
    summary: str
    start_time: datetime
    end_time: datetime | None = None
    is_all_day: bool = False
    meeting_url: str | None = None
    attendee_emails: list[str] = Field(default_factory=list)
    related_contact_ids: list[int] = Field(default_factory=list)


class CalendarSyncResponse(BaseModel):
    """Outcome of a calendar sync."""

    success: bool = True
    synced: int
    total: int
    events: list[SyncedEvent]


class CalendarEventResponse(BaseModel):
    """Schema for a stored calendar event."""

    id: int
    google_event_id: str
    summary: str
    description: str | None = None
    location: str | None = None
    meeting_url: str | None = None
    start_time: datetime
    end_time: datetime | None = None
    is_all_day: bool
    related_contact_ids: list[int] = Field(default_factory=list)
    contacts: list[LinkedContact] = Field(default_factory=list)


class CalendarEventListResponse(BaseModel):
    events: list[CalendarEventResponse]
