"""Daily outreach queue API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.services.database import get_db
from outreach.models.contact import Contact
from outreach.models.daily_queue import DailyQueueItem, QueueState
from outreach.core.daily_queue import (
    QueueItemNotFoundError,
    generate_queue,
    queue_stats,
    set_queue_state,
    today_utc,
)
from outreach.schemas.contact import ContactResponse
from outreach.schemas.daily_queue import (
    DailyQueueResponse,
    QueueGenerateRequest,
    QueueGenerateResponse,
    QueueItemResponse,
    QueueItemUpdateResponse,
    QueueStats,
)

router = APIRouter()


@router.get("", response_model=DailyQueueResponse)
async def get_daily_queue(
    db: Annotated[AsyncSession, Depends(get_db)],
    queue_date: date | None = Query(None, alias="date"),
    state: QueueState = QueueState.PENDING,
) -> DailyQueueResponse:
    """Queue entries for a day (today by default) in one state, oldest first."""
    queue_date = queue_date or today_utc()

    result = await db.execute(
        select(DailyQueueItem, Contact)
        .join(Contact, Contact.id == DailyQueueItem.contact_id)
        .where(DailyQueueItem.queue_date == queue_date)
        .where(DailyQueueItem.state == state)
        .order_by(DailyQueueItem.added_at, DailyQueueItem.id)
    )

    queue = [
        QueueItemResponse(
            queue_id=item.id,
            queue_date=item.queue_date,
            queue_state=item.state,
            queue_added_at=item.added_at,
            contact=ContactResponse.model_validate(contact),
        )
        for item, contact in result.all()
    ]

    return DailyQueueResponse(
        queue=queue,
        stats=QueueStats(**await queue_stats(db, queue_date)),
        queue_date=queue_date,
    )


@router.post("/generate", response_model=QueueGenerateResponse)
async def generate_daily_queue(
    db: Annotated[AsyncSession, Depends(get_db)],
    request: QueueGenerateRequest | None = None,
) -> QueueGenerateResponse:
    """Rebuild today's queue from new contacts, replacing any existing one."""
    limit = request.limit if request else QueueGenerateRequest().limit
    queue_date = today_utc()

    items = await generate_queue(db, limit=limit, queue_date=queue_date)

    return QueueGenerateResponse(
        queue_date=queue_date,
        pending=len(items),
        added=len(items),
        limit=limit,
        message=None if items else "No new contacts to queue",
    )


async def update_queue_item(db: AsyncSession, queue_id: int, state: QueueState) -> QueueItemUpdateResponse:
    try:
        item, contact = await set_queue_state(db, queue_id, state)
    except QueueItemNotFoundError:
        raise HTTPException(status_code=404, detail="Queue item not found")

    return QueueItemUpdateResponse(
        queue_id=item.id,
        queue_state=item.state,
        contact=ContactResponse.model_validate(contact),
    )


@router.patch("/{queue_id}/mark-contacted", response_model=QueueItemUpdateResponse)
async def mark_contacted(
    queue_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> QueueItemUpdateResponse:
    """Record that a queued contact was reached."""
    return await update_queue_item(db, queue_id, QueueState.CONTACTED)


@router.patch("/{queue_id}/skip", response_model=QueueItemUpdateResponse)
async def skip_queue_item(
    queue_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> QueueItemUpdateResponse:
    """Leave a queued contact for another day."""
    return await update_queue_item(db, queue_id, QueueState.SKIPPED)
