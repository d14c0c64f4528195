"""Daily outreach queue schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from outreach.models.daily_queue import QueueState
from outreach.schemas.contact import ContactResponse


class QueueGenerateRequest(BaseModel):
    limit: int = Field(150, ge=1, le=500)


class QueueGenerateResponse(BaseModel):
    """Result of rebuilding today's queue."""

    success: bool = True
    queue_date: date
    pending: int
    added: int
    limit: int
    message: str | None = None


class QueueItemResponse(BaseModel):
    """A queue entry with its contact."""

    queue_id: int
    queue_date: date
    queue_state: QueueState
    queue_added_at: datetime
    contact: ContactResponse


class QueueStats(BaseModel):
    pending: int
    contacted: int
    skipped: int
    total: int


class DailyQueueResponse(BaseModel):
    queue: list[QueueItemResponse]
    stats: QueueStats
    queue_date: date


class QueueItemUpdateResponse(BaseModel):
    success: bool = True
    queue_id: int
    queue_state: QueueState
    contact: ContactResponse
