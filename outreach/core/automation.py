"""Automation log bookkeeping for scheduled and cron-triggered jobs."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from outreach.models.automation_log import AutomationLog, JobStatus

logger = logging.getLogger(__name__)

# A job body takes a session and returns (log message, details)
JobBody = Callable[[AsyncSession], Awaitable[tuple[str, dict[str, Any]]]]


@dataclass
class JobResult:
    """Outcome of one tracked job run."""

    job_name: str
    success: bool
    message: str
    execution_time_ms: int
    details: dict[str, Any] = field(default_factory=dict)


async def record_log(
    db: AsyncSession,
    job_name: str,
    status: JobStatus,
    message: str,
    execution_time_ms: int | None = None,
) -> None:
    db.add(AutomationLog(
        job_name=job_name,
        status=status,
        message=message,
        execution_time_ms=execution_time_ms,
    ))
    await db.commit()


async def run_tracked_job(
    db: AsyncSession,
    job_name: str,
    start_message: str,
    body: JobBody,
) -> JobResult:
    """
    Run a job body between a ``running`` and a ``success``/``failed`` log row.

    Failures are logged and returned as an unsuccessful result rather than
    raised, so one bad run never takes the scheduler down.
    """
    started = time.monotonic()
    await record_log(db, job_name, JobStatus.RUNNING, start_message)

    try:
        message, details = await body(db)
    except Exception as e:
        await db.rollback()
        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.exception(f"Job {job_name} failed")
        await record_log(db, job_name, JobStatus.FAILED, f"Error: {e}", elapsed_ms)
        return JobResult(
            job_name=job_name,
            success=False,
            message=str(e),
            execution_time_ms=elapsed_ms,
        )

    elapsed_ms = int((time.monotonic() - started) * 1000)
    await record_log(db, job_name, JobStatus.SUCCESS, message, elapsed_ms)
    logger.info(f"Job {job_name} completed in {elapsed_ms}ms: {message}")
    return JobResult(
        job_name=job_name,
        success=True,
        message=message,
        execution_time_ms=elapsed_ms,
        details=details,
    )
