"""Google Calendar access for syncing upcoming meetings."""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.services.google_sheets import GoogleNotConnectedError, get_google_credentials

logger = logging.getLogger(__name__)

MEETING_URL_PATTERNS = [
    re.compile(r"https://meet\.google\.com/[a-z-]+", re.IGNORECASE),
    re.compile(r"https://zoom\.us/j/\d+", re.IGNORECASE),
    re.compile(r"https://\S*\.zoom\.us/j/\d+", re.IGNORECASE),
    re.compile(r"https://teams\.microsoft\.com/l/meetup-join\S*", re.IGNORECASE),
]


class CalendarError(Exception):
    """Google Calendar could not be read."""


async def get_calendar_service(db: AsyncSession):
    """Create Google Calendar API service."""
    credentials = await get_google_credentials(db)
    return build("calendar", "v3", credentials=credentials)


async def get_upcoming_events(db: AsyncSession, days: int = 30, max_results: int = 50) -> list[dict]:
    """Raw events on the primary calendar from now until ``days`` ahead."""
    service = await get_calendar_service(db)

    now = datetime.now(timezone.utc)
    try:
        events_result = (
            service.events()
            .list(
                calendarId="primary",
                timeMin=now.isoformat(),
                timeMax=(now + timedelta(days=days)).isoformat(),
                maxResults=max_results,
                singleEvents=True,
                orderBy="startTime",
            )
            .execute()
        )
    except HttpError as e:
        if e.resp.status == 401:
            raise GoogleNotConnectedError(
                "Google Calendar authorization expired. Please re-authenticate."
            ) from e
        logger.error(f"Error listing calendar events: {e}")
        raise CalendarError("Failed to fetch calendar events") from e

    return events_result.get("items", [])


def _parse_time(value: dict, all_day_end: bool = False) -> datetime | None:
    # Stored as naive UTC, like every other timestamp in the database
    if "dateTime" in value:
        parsed = datetime.fromisoformat(value["dateTime"].replace("Z", "+00:00"))
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed
    if value.get("date"):
        parsed = datetime.fromisoformat(value["date"])
        if all_day_end:
            return parsed.replace(hour=23, minute=59, second=59)
        return parsed
    return None


def extract_meeting_url(event: dict) -> str | None:
    """Video link from conference data, the Meet link or the description."""
    for entry in event.get("conferenceData", {}).get("entryPoints", []):
        if entry.get("entryPointType") == "video" and entry.get("uri"):
            return entry["uri"]

    if event.get("hangoutLink"):
        return event["hangoutLink"]

    description = event.get("description") or ""
    for pattern in MEETING_URL_PATTERNS:
        match = pattern.search(description)
        if match:
            return match.group(0)
    return None


def parse_calendar_event(event: dict) -> dict[str, Any]:
    """Flatten a Google Calendar event into the fields we store."""
    start = event.get("start", {})
    end = event.get("end", {})

    attendee_emails = [
        attendee["email"].lower()
        for attendee in event.get("attendees", [])
        if attendee.get("email")
    ]

    return {
        "google_event_id": event.get("id", ""),
        "summary": event.get("summary") or "(No title)",
        "description": event.get("description") or "",
        "location": event.get("location"),
        "start_time": _parse_time(start),
        "end_time": _parse_time(end, all_day_end=True),
        "is_all_day": "dateTime" not in start,
        "attendee_emails": attendee_emails,
        "meeting_url": extract_meeting_url(event),
    }
