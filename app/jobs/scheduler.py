"""APScheduler setup and job registration."""

from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.config import settings
from app.jobs.bill_reminders import bill_reminders

scheduler = AsyncIOScheduler(timezone=settings.timezone)


def register_jobs() -> None:
    """Register all periodic jobs if not already present."""
    if scheduler.get_job("bill_reminders") is None:
        scheduler.add_job(
            bill_reminders,
            CronTrigger(hour=settings.bill_reminder_hour, minute=0, timezone=settings.timezone),
            id="bill_reminders",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
