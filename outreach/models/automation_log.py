"""Automation job execution log."""

from datetime import datetime
from enum import Enum

from sqlalchemy import String, DateTime, Text, Integer, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from outreach.services.database import Base


class JobStatus(str, Enum):
    """Lifecycle of a single job run."""

    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class AutomationLog(Base):
    """One status entry written by a scheduled or cron-triggered job."""

    __tablename__ = "automation_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    job_name: Mapped[str] = mapped_column(String(100), index=True)
    status: Mapped[JobStatus] = mapped_column(
        SQLEnum(JobStatus, values_callable=lambda x: [e.value for e in x])
    )
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    execution_time_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
