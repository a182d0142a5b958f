"""Daily bill reminder scheduled job."""

from __future__ import annotations

import logging

from app.config import settings
from app.services.bill_service import BillService
from app.utils.supabase_client import get_service_client
from app.utils.time import local_today

logger = logging.getLogger(__name__)


async def bill_reminders() -> None:
    """Store today's reminders for unpaid bills that are due soon."""
    client = get_service_client()
    bills = BillService(client)

    today = local_today(settings.timezone)
    families = client.table("families").select("id").execute().data or []
    created = 0
    for family in families:
        created += bills.record_reminders(str(family["id"]), today=today)

    logger.info(
        "bill_reminders completed for %s families, %s reminders created", len(families), created
    )
