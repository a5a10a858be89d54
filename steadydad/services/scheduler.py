"""
APScheduler setup: recurring jobs.

Jobs:
  - Glanceable refresh: every GLANCEABLES_REFRESH_MINUTES (skipped when 0 or glanceables disabled)
"""

import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from .tasks import refresh_glanceables_task
from .caregiving_session import get_caregiving_session
from ..core.settings import settings

logger = logging.getLogger(__name__)

scheduler: Optional[AsyncIOScheduler] = None


# Used by: start_scheduler
async def _run_glanceable_refresh():
    await refresh_glanceables_task(get_caregiving_session())


# Used by: main (lifespan startup)
async def start_scheduler():
    """Initialize and start APScheduler."""
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already running")
        return

    if settings.GLANCEABLES_REFRESH_MINUTES <= 0:
        logger.info("Glanceable refresh disabled - scheduler not started")
        return

    logger.info("Initializing scheduler...")

    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        _run_glanceable_refresh,
        trigger=IntervalTrigger(minutes=settings.GLANCEABLES_REFRESH_MINUTES),
        id="glanceable_refresh",
        name="Re-push dashboard snapshot to widget and live activity",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    scheduler.start()
    logger.info(
        f"Scheduler started successfully:\n"
        f"  - Glanceable refresh: every {settings.GLANCEABLES_REFRESH_MINUTES} minutes"
    )


# Used by: main (lifespan shutdown)
async def stop_scheduler():
    global scheduler

    if scheduler is None:
        return

    logger.info("Shutting down scheduler...")
    scheduler.shutdown(wait=True)
    scheduler = None
    logger.info("Scheduler stopped")


# Used by: api/glanceables.py (GET /glanceables/status)
def get_scheduler_status() -> dict:
    if scheduler is None:
        return {
            "running": False,
            "jobs": []
        }

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
        })

    return {
        "running": scheduler.running,
        "jobs": jobs
    }
