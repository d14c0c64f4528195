"""Scheduled background jobs using APScheduler."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.config import get_settings
from outreach.core.automation import JobResult, run_tracked_job
from outreach.core.contact_importer import sync_saved_sheet
from outreach.core.followup_tracker import FollowupTracker
from outreach.services.database import async_session_maker

settings = get_settings()
logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()

SHEETS_SYNC_JOB = "sync-sheets"
FOLLOWUP_CHECK_JOB = "check-followups"


async def run_sheets_sync(db: AsyncSession) -> JobResult:
    """Sync the saved spreadsheet, auto-merging confident duplicates."""
    return await run_tracked_job(
        db,
        SHEETS_SYNC_JOB,
        "Starting automatic Google Sheets sync",
        sync_saved_sheet,
    )


async def run_followup_check(db: AsyncSession) -> JobResult:
    """Record contacts whose follow-up date has passed."""

    async def body(session: AsyncSession):
        return await FollowupTracker(session).check_followups()

    return await run_tracked_job(
        db,
        FOLLOWUP_CHECK_JOB,
        "Checking for contacts needing follow-up",
        body,
    )


async def sheets_sync_job():
    """Daily Google Sheets sync."""
    logger.info("Starting sheets sync job")
    async with async_session_maker() as db:
        result = await run_sheets_sync(db)
    if not result.success:
        logger.error(f"Sheets sync job failed: {result.message}")


async def followup_check_job():
    """Hourly follow-up check."""
    logger.info("Starting follow-up check job")
    async with async_session_maker() as db:
        result = await run_followup_check(db)
    if not result.success:
        logger.error(f"Follow-up check job failed: {result.message}")


async def start_scheduler():
    """Start the scheduler with all jobs."""
    scheduler.add_job(
        sheets_sync_job,
        CronTrigger(
            hour=settings.sheets_sync_hour,
            minute=settings.sheets_sync_minute,
            timezone=settings.timezone,
        ),
        id="sheets_sync",
        name="Google Sheets Sync",
        replace_existing=True,
    )

    scheduler.add_job(
        followup_check_job,
        IntervalTrigger(minutes=settings.followup_check_interval_minutes),
        id="followup_check",
        name="Follow-up Check",
        replace_existing=True,
    )

    scheduler.start()
    logger.info("Scheduler started with all jobs")


async def stop_scheduler():
    """Stop the scheduler."""
    scheduler.shutdown(wait=False)
    logger.info("Scheduler stopped")


def get_job_status() -> list[dict]:
    """Get status of all scheduled jobs."""
    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
            "trigger": str(job.trigger),
        })
    return jobs
