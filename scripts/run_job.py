#!/usr/bin/env python3
"""Run a scheduled job once, outside the API server.

Useful for backfilling after downtime or checking a new sheets config
without waiting for the scheduler.

Usage:
    python scripts/run_job.py sync-sheets
    python scripts/run_job.py check-followups
"""

import asyncio
import argparse
import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def main(job_name: str) -> int:
    """Run one job and print its result."""
    from outreach.services.database import async_session_maker
    from outreach.scheduler.jobs import (
        FOLLOWUP_CHECK_JOB,
        SHEETS_SYNC_JOB,
        run_followup_check,
        run_sheets_sync,
    )

    runners = {
        SHEETS_SYNC_JOB: run_sheets_sync,
        FOLLOWUP_CHECK_JOB: run_followup_check,
    }

    logger.info(f"Running {job_name}")
    async with async_session_maker() as db:
        result = await runners[job_name](db)

    print("\n" + "=" * 60)
    print(f"{result.job_name.upper()} {'SUCCEEDED' if result.success else 'FAILED'}")
    print("=" * 60)
    print(result.message)
    for key, value in result.details.items():
        print(f"  {key}: {value}")
    print(f"Took {result.execution_time_ms}ms")
    print("=" * 60)

    return 0 if result.success else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run an outreach automation job once")
    parser.add_argument(
        "job",
        choices=["sync-sheets", "check-followups"],
        help="Job to run",
    )

    args = parser.parse_args()

    exit_code = asyncio.run(main(args.job))
    sys.exit(exit_code)
