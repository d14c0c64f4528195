"""Automation log and job schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from outreach.models.automation_log import JobStatus


class AutomationLogResponse(BaseModel):
    """Schema for an automation log entry."""

    id: int
    job_name: str
    status: JobStatus
    message: str | None = None
    execution_time_ms: int | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class AutomationLogListResponse(BaseModel):
    logs: list[AutomationLogResponse]


class JobRunResponse(BaseModel):
    """Result of a cron-triggered job."""

    success: bool
    job_name: str
    message: str
    execution_time_ms: int
    details: dict[str, Any] = Field(default_factory=dict)


class ScheduledJob(BaseModel):
    id: str
    name: str
    next_run: str | None = None
    trigger: str
