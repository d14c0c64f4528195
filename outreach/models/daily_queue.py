"""Daily outreach queue."""

from datetime import date, datetime
from enum import Enum

from sqlalchemy import Date, DateTime, ForeignKey, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from outreach.services.database import Base


class QueueState(str, Enum):
    """Progress of one queued contact."""

    PENDING = "pending"
    CONTACTED = "contacted"
    SKIPPED = "skipped"


class DailyQueueItem(Base):
    """A contact picked for outreach on a given day."""

    __tablename__ = "daily_queue"

    id: Mapped[int] = mapped_column(primary_key=True)
    queue_date: Mapped[date] = mapped_column(Date, index=True)
    contact_id: Mapped[int] = mapped_column(ForeignKey("contacts.id", ondelete="CASCADE"))
    state: Mapped[QueueState] = mapped_column(
        SQLEnum(QueueState, values_callable=lambda x: [e.value for e in x]),
        default=QueueState.PENDING,
    )

    added_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        UniqueConstraint("queue_date", "contact_id", name="uq_daily_queue_date_contact"),
    )
