"""Test email classification, inbox scan and flagged email endpoints."""

from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.models.contact import Contact, ContactPriority
from outreach.models.flagged_email import FlaggedEmail
from outreach.services.gmail import GmailError
from outreach.services.google_sheets import GoogleNotConnectedError


async def create_test_contact(db: AsyncSession) -> Contact:
    """Create a test contact."""
    contact = Contact(
        name="Jon Smith",
        email="jon@acme.com",
        company="Acme",
        priority=ContactPriority.HIGH,
    )
    db.add(contact)
    await db.commit()
    await db.refresh(contact)
    return contact


@pytest.mark.asyncio
async def test_classify_known_contact(client: AsyncClient, db_session: AsyncSession):
    """Email from a stored contact is flagged high."""
    contact = await create_test_contact(db_session)

    response = await client.post("/api/v1/emails/classify", json={
        "from_email": "Jon@Acme.com",
        "subject": "Can we schedule a call?",
        "body": "Need an answer today",
    })

    assert response.status_code == 200
    data = response.json()
    assert data["should_flag"] is True
    assert data["priority"] == "high"
    assert data["contact_id"] == contact.id
    assert data["requires_action"] is True
    assert data["action_items"] == ["Schedule meeting", "Return call"]
    assert data["priority_score"] == 70


@pytest.mark.asyncio
async def test_classify_same_domain(client: AsyncClient, db_session: AsyncSession):
    contact = await create_test_contact(db_session)

    response = await client.post("/api/v1/emails/classify", json={
        "from_email": "ops@acme.com",
        "subject": "Hello",
        "body": "Checking in",
    })

    data = response.json()
    assert data["should_flag"] is True
    assert data["priority"] == "low"
    assert data["reason"] == "Same domain as contact: Jon Smith (Acme)"
    assert data["contact_id"] == contact.id


@pytest.mark.asyncio
async def test_classify_unrelated(client: AsyncClient):
    response = await client.post("/api/v1/emails/classify", json={
        "from_email": "news@letters.org",
        "subject": "Weekly digest",
    })

    data = response.json()
    assert data["should_flag"] is False
    assert data["priority_score"] == 0
    assert data["action_items"] == []


# =============================================================================
# INBOX SCAN
# =============================================================================

def make_message(message_id: str, from_email: str, subject: str, body: str = "", **overrides) -> dict:
    """A parsed Gmail message as returned by the Gmail service."""
    message = {
        "id": message_id,
        "thread_id": f"thread-{message_id}",
        "from": from_email,
        "from_email": from_email,
        "to": "me@self.com",
        "subject": subject,
        "snippet": body[:50],
        "body": body,
        "is_unread": True,
        "received_at": datetime(2030, 1, 10, 9, 0),
    }
    message.update(overrides)
    return message


def patch_inbox(messages=None, error=None):
    return patch(
        "outreach.core.email_scanner.get_recent_messages",
        new=AsyncMock(return_value=messages, side_effect=error),
    )


@pytest.mark.asyncio
async def test_scan_flags_contact_and_keyword_emails(client: AsyncClient, db_session: AsyncSession):
    """Known senders and partnership keywords are flagged; the rest are ignored."""
    contact = await create_test_contact(db_session)
    messages = [
        make_message("m1", "jon@acme.com", "Re: booth", "Can we talk today?", is_unread=False),
        make_message("m2", "someone@new.io", "Sponsorship proposal", "Details inside"),
        make_message("m3", "news@letters.org", "Weekly digest", "Nothing here"),
    ]

    with patch_inbox(messages):
        response = await client.post("/api/v1/emails/scan")

    assert response.status_code == 200
    data = response.json()
    assert data["scanned"] == 3
    assert data["flagged"] == 2
    assert data["newly_flagged"][0] == {
        "subject": "Re: booth",
        "from_email": "jon@acme.com",
        "reason": "Email from known contact: Jon Smith",
    }
    assert data["newly_flagged"][1]["reason"].startswith("Contains keywords: sponsor")

    result = await db_session.execute(select(FlaggedEmail).order_by(FlaggedEmail.id))
    flagged = result.scalars().all()
    assert [e.gmail_message_id for e in flagged] == ["m1", "m2"]
    assert flagged[0].contact_id == contact.id
    assert flagged[0].is_read is True
    assert flagged[0].action_required is True
    assert flagged[1].contact_id is None
    assert flagged[1].is_read is False

    await db_session.refresh(contact)
    assert contact.last_contact_date is not None


@pytest.mark.asyncio
async def test_scan_skips_already_flagged(client: AsyncClient, db_session: AsyncSession):
    """Rescanning the same inbox adds nothing new."""
    await create_test_contact(db_session)
    messages = [make_message("m1", "jon@acme.com", "Hello")]

    with patch_inbox(messages):
        first = await client.post("/api/v1/emails/scan")
        second = await client.post("/api/v1/emails/scan")

    assert first.json()["flagged"] == 1
    assert second.json()["scanned"] == 1
    assert second.json()["flagged"] == 0

    result = await db_session.execute(select(FlaggedEmail))
    assert len(result.scalars().all()) == 1


@pytest.mark.asyncio
async def test_scan_uses_snippet_without_body(client: AsyncClient):
    message = make_message("m1", "x@y.io", "Hello", "", snippet="Interested in a partnership")

    with patch_inbox([message]):
        response = await client.post("/api/v1/emails/scan")

    assert response.json()["flagged"] == 1


@pytest.mark.asyncio
async def test_scan_google_not_connected(client: AsyncClient):
    with patch_inbox(error=GoogleNotConnectedError("Google account not connected. Please re-authenticate.")):
        response = await client.post("/api/v1/emails/scan")

    assert response.status_code == 401
    assert "not connected" in response.json()["detail"]


@pytest.mark.asyncio
async def test_scan_gmail_failure(client: AsyncClient):
    with patch_inbox(error=GmailError("Failed to fetch Gmail messages")):
        response = await client.post("/api/v1/emails/scan")

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to fetch Gmail messages"


# =============================================================================
# FLAGGED EMAILS
# =============================================================================

async def create_flagged_email(db: AsyncSession, **overrides) -> FlaggedEmail:
    data = {
        "gmail_message_id": "m1",
        "from_email": "jon@acme.com",
        "subject": "Hello",
        "received_at": datetime(2030, 1, 10, 9, 0),
    }
    data.update(overrides)
    email = FlaggedEmail(**data)
    db.add(email)
    await db.commit()
    await db.refresh(email)
    return email


@pytest.mark.asyncio
async def test_list_flagged_emails(client: AsyncClient, db_session: AsyncSession):
    """Newest first, with the linked contact's name and company."""
    contact = await create_test_contact(db_session)
    await create_flagged_email(db_session, contact_id=contact.id)
    await create_flagged_email(
        db_session,
        gmail_message_id="m2",
        from_email="x@y.io",
        received_at=datetime(2030, 1, 11, 9, 0),
        is_read=True,
        action_required=True,
    )

    response = await client.get("/api/v1/emails")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [e["gmail_message_id"] for e in data["emails"]] == ["m2", "m1"]
    assert data["emails"][1]["contact_name"] == "Jon Smith"
    assert data["emails"][1]["contact_company"] == "Acme"
    assert data["emails"][0]["contact_name"] is None

    response = await client.get("/api/v1/emails", params={"is_read": "false"})
    assert [e["gmail_message_id"] for e in response.json()["emails"]] == ["m1"]

    response = await client.get("/api/v1/emails", params={"action_required": "true"})
    assert [e["gmail_message_id"] for e in response.json()["emails"]] == ["m2"]


@pytest.mark.asyncio
async def test_update_flagged_email(client: AsyncClient, db_session: AsyncSession):
    email = await create_flagged_email(db_session)

    response = await client.patch(f"/api/v1/emails/{email.id}", json={"is_read": True})

    assert response.status_code == 200
    data = response.json()
    assert data["is_read"] is True
    assert data["action_required"] is False


@pytest.mark.asyncio
async def test_update_flagged_email_not_found(client: AsyncClient):
    response = await client.patch("/api/v1/emails/9999", json={"is_read": True})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_flagged_email(client: AsyncClient, db_session: AsyncSession):
    email = await create_flagged_email(db_session)

    response = await client.delete(f"/api/v1/emails/{email.id}")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    result = await db_session.execute(select(FlaggedEmail))
    assert result.scalars().all() == []
