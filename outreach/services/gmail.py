"""Gmail access for scanning the inbox for contact replies."""

import base64
import logging
import re
from datetime import datetime, timezone
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.services.google_sheets import GoogleNotConnectedError, get_google_credentials

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r"<(.+?)>")


class GmailError(Exception):
    """Gmail could not be read."""


async def get_gmail_service(db: AsyncSession):
    """Create Gmail API service."""
    credentials = await get_google_credentials(db)
    return build("gmail", "v1", credentials=credentials)


async def get_recent_messages(db: AsyncSession, count: int = 50) -> list[dict[str, Any]]:
    """Fetch and parse the newest ``count`` messages in the inbox."""
    service = await get_gmail_service(db)

    try:
        listing = service.users().messages().list(
            userId="me",
            maxResults=count,
            labelIds=["INBOX"],
        ).execute()

        messages = []
        for item in listing.get("messages", []):
            email_data = service.users().messages().get(
                userId="me",
                id=item["id"],
                format="full",
            ).execute()
            messages.append(parse_email_message(email_data))
    except HttpError as e:
        if e.resp.status == 401:
            raise GoogleNotConnectedError(
                "Gmail authorization expired. Please re-authenticate."
            ) from e
        logger.error(f"Error fetching Gmail messages: {e}")
        raise GmailError("Failed to fetch Gmail messages") from e

    return messages


def extract_address(header: str) -> str:
    """Address part of ``Name <email@example.com>``, or the header itself."""
    match = ADDRESS_PATTERN.search(header)
    return match.group(1) if match else header.strip()


def _decode(data: str) -> str:
    return base64.urlsafe_b64decode(data).decode("utf-8", errors="ignore")


def extract_body(payload: dict) -> str:
    """Plain text body of a message, searching nested parts."""
    if payload.get("mimeType", "text/plain") == "text/plain":
        data = payload.get("body", {}).get("data")
        if data:
            return _decode(data)

    for part in payload.get("parts", []):
        body = extract_body(part) if part.get("mimeType") else ""
        if body:
            return body

    return ""


def parse_email_message(email_data: dict) -> dict[str, Any]:
    """Pull sender, subject, text and read state out of a full Gmail message."""
    payload = email_data.get("payload", {})
    headers = {h["name"].lower(): h["value"] for h in payload.get("headers", [])}
    labels = email_data.get("labelIds", [])

    internal_date = email_data.get("internalDate")
    received_at = (
        datetime.fromtimestamp(int(internal_date) / 1000, tz=timezone.utc).replace(tzinfo=None)
        if internal_date
        else datetime.utcnow()
    )

    return {
        "id": email_data.get("id"),
        "thread_id": email_data.get("threadId"),
        "from": headers.get("from", ""),
        "from_email": extract_address(headers.get("from", "")),
        "to": headers.get("to", ""),
        "subject": headers.get("subject", ""),
        "snippet": email_data.get("snippet", ""),
        "body": extract_body(payload),
        "is_unread": "UNREAD" in labels,
        "received_at": received_at,
    }
