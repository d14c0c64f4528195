"""Automation logs, scheduler status and cron trigger endpoints."""

import hmac
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.config import get_settings
from outreach.core.automation import JobResult
from outreach.services.database import get_db
from outreach.models.automation_log import AutomationLog
from outreach.scheduler.jobs import get_job_status, run_followup_check, run_sheets_sync
from outreach.schemas.automation import (
    AutomationLogListResponse,
    AutomationLogResponse,
    JobRunResponse,
    ScheduledJob,
)

router = APIRouter()
logger = logging.getLogger(__name__)


async def verify_cron_secret(
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Require ``Authorization: Bearer <cron_secret>``."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized - Invalid or missing CRON_SECRET",
    )

    cron_secret = get_settings().cron_secret
    if not cron_secret:
        logger.error("CRON_SECRET not configured")
        raise unauthorized

    if not authorization or not authorization.startswith("Bearer "):
        raise unauthorized

    token = authorization[len("Bearer "):]
    if not hmac.compare_digest(token, cron_secret):
        raise unauthorized


def to_job_response(result: JobResult) -> JobRunResponse:
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": f"Failed to run {result.job_name}", "details": result.message},
        )
    return JobRunResponse(
        success=True,
        job_name=result.job_name,
        message=result.message,
        execution_time_ms=result.execution_time_ms,
        details=result.details,
    )


@router.get("/logs", response_model=AutomationLogListResponse)
async def list_logs(
    db: Annotated[AsyncSession, Depends(get_db)],
    job_name: str | None = None,
    limit: int = Query(50, ge=1, le=500),
) -> AutomationLogListResponse:
    """List automation job logs, newest first."""
    query = (
        select(AutomationLog)
        .order_by(AutomationLog.created_at.desc(), AutomationLog.id.desc())
        .limit(limit)
    )
    if job_name:
        query = query.where(AutomationLog.job_name == job_name)

    result = await db.execute(query)
    return AutomationLogListResponse(
        logs=[AutomationLogResponse.model_validate(log) for log in result.scalars().all()]
    )


@router.get("/jobs", response_model=list[ScheduledJob])
async def list_jobs() -> list[ScheduledJob]:
    """Get status of scheduled jobs."""
    return [ScheduledJob(**job) for job in get_job_status()]


@router.post(
    "/cron/sync-sheets",
    response_model=JobRunResponse,
    dependencies=[Depends(verify_cron_secret)],
)
async def cron_sync_sheets(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> JobRunResponse:
    """Run the Google Sheets sync now."""
    return to_job_response(await run_sheets_sync(db))


@router.post(
    "/cron/check-followups",
    response_model=JobRunResponse,
    dependencies=[Depends(verify_cron_secret)],
)
async def cron_check_followups(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> JobRunResponse:
    """Run the follow-up check now."""
    return to_job_response(await run_followup_check(db))
