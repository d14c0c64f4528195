"""Dashboard API endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.services.database import get_db
from outreach.models.contact import Contact, ContactStatus
from outreach.schemas.dashboard import DashboardStats

router = APIRouter()

# Statuses that count as having been reached out to
CONTACTED_STATUSES = (
    ContactStatus.CONTACTED,
    ContactStatus.RESPONDED,
    ContactStatus.INTERESTED,
    ContactStatus.DECLINED,
)
RESPONDED_STATUSES = (ContactStatus.RESPONDED, ContactStatus.INTERESTED)


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DashboardStats:
    """Get outreach pipeline statistics."""
    result = await db.execute(
        select(Contact.status, func.count(Contact.id)).group_by(Contact.status)
    )
    status_counts = {s.value: 0 for s in ContactStatus}
    for contact_status, count in result.all():
        status_counts[ContactStatus(contact_status).value] = count

    total_contacted = sum(status_counts[s.value] for s in CONTACTED_STATUSES)
    total_responded = sum(status_counts[s.value] for s in RESPONDED_STATUSES)
    response_rate = round(total_responded / total_contacted * 100) if total_contacted else 0

    end_of_today = datetime.utcnow().replace(hour=23, minute=59, second=59, microsecond=999999)
    followups_result = await db.execute(
        select(func.count(Contact.id)).where(
            and_(
                Contact.next_followup_date.is_not(None),
                Contact.next_followup_date <= end_of_today,
            )
        )
    )

    return DashboardStats(
        total_contacts=sum(status_counts.values()),
        status_counts=status_counts,
        active_outreach=status_counts[ContactStatus.CONTACTED.value],
        response_rate=response_rate,
        followups_due=followups_result.scalar_one(),
    )
