"""Test dashboard endpoints."""

from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.models.contact import Contact, ContactStatus


async def create_contacts(db: AsyncSession, statuses: list[ContactStatus]) -> list[Contact]:
    """Create one contact per status."""
    contacts = [
        Contact(name=f"Contact {i}", email=f"contact{i}@acme.com", status=status)
        for i, status in enumerate(statuses)
    ]
    db.add_all(contacts)
    await db.commit()
    return contacts


@pytest.mark.asyncio
async def test_dashboard_stats_empty(client: AsyncClient):
    """Test stats with no contacts."""
    response = await client.get("/api/v1/dashboard/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["total_contacts"] == 0
    assert data["response_rate"] == 0
    assert data["followups_due"] == 0
    assert set(data["status_counts"]) == {
        "new", "contacted", "responded", "interested", "accepted", "declined"
    }


@pytest.mark.asyncio
async def test_dashboard_stats(client: AsyncClient, db_session: AsyncSession):
    """Test pipeline counts, response rate and due follow-ups."""
    contacts = await create_contacts(db_session, [
        ContactStatus.NEW,
        ContactStatus.CONTACTED,
        ContactStatus.CONTACTED,
        ContactStatus.RESPONDED,
        ContactStatus.INTERESTED,
        ContactStatus.DECLINED,
        ContactStatus.ACCEPTED,
    ])
    contacts[3].next_followup_date = datetime.utcnow() - timedelta(days=1)
    contacts[4].next_followup_date = datetime.utcnow() + timedelta(days=10)
    await db_session.commit()

    response = await client.get("/api/v1/dashboard/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["total_contacts"] == 7
    assert data["status_counts"]["contacted"] == 2
    assert data["status_counts"]["accepted"] == 1
    assert data["active_outreach"] == 2
    # 2 responded or interested out of 5 contacted
    assert data["response_rate"] == 40
    assert data["followups_due"] == 1
