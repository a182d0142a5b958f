"""Background job modules for periodic household tasks."""

from app.jobs.bill_reminders import bill_reminders

__all__ = ["bill_reminders"]
