"""Household bill tracking and reminders."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from app.config import settings
from app.services.common import SupabaseService
from app.services.permissions import Action, Actor, ensure_allowed
from app.utils.time import now_utc, utc_today
from supabase import Client


class BillService:
    """Create, pay, delete, and look ahead at family bills."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def _get(self, family_id: str, bill_id: str) -> dict[str, Any]:
        return self.db.select_one(
            "bills", {"id": bill_id, "family_id": family_id}, not_found_label="Bill"
        )

    def list_bills(self, actor: Actor) -> list[dict[str, Any]]:
        """Return family bills by due date."""
        ensure_allowed(actor, Action.LIST_BILLS)
        return self.db.select_many(
            "bills", filters={"family_id": actor.family_id}, order_by="due_date"
        )

    def create(self, actor: Actor, payload: dict[str, Any]) -> dict[str, Any]:
        """Add an unpaid bill."""
        ensure_allowed(actor, Action.ADD_BILL)
        return self.db.insert_one(
            "bills",
            {
                **payload,
                "family_id": actor.family_id,
                "created_by": actor.id,
                "paid": False,
                "paid_on": None,
            },
        )

    def mark_paid(self, actor: Actor, bill_id: str) -> dict[str, Any]:
        """Mark a bill paid; paying again only refreshes ``paid_on``."""
        ensure_allowed(actor, Action.PAY_BILL)
        bill = self._get(actor.family_id, bill_id)
        patch = {"paid": True, "paid_on": now_utc().isoformat()}
        rows = self.db.update("bills", {"id": bill_id, "family_id": actor.family_id}, patch)
        return rows[0] if rows else {**bill, **patch}

    def delete(self, actor: Actor, bill_id: str) -> None:
        """Delete a family bill."""
        ensure_allowed(actor, Action.DELETE_BILL)
        self._get(actor.family_id, bill_id)
        self.db.delete("bills", {"id": bill_id, "family_id": actor.family_id})

    def upcoming(self, family_id: str, today: date | None = None) -> list[dict[str, Any]]:
        """Unpaid bills due within the reminder window, soonest first."""
        start = today or utc_today()
        end = start + timedelta(days=settings.upcoming_bill_window_days)
        rows = self.db.select_between(
            "bills",
            {"family_id": family_id, "paid": False},
            column="due_date",
            start=start.isoformat(),
            end=end.isoformat(),
            inclusive_end=True,
        )
        return sorted(rows, key=lambda row: str(row["due_date"]))

    def reminders(self, actor: Actor) -> list[dict[str, Any]]:
        """Return stored reminders for the family, newest first."""
        ensure_allowed(actor, Action.LIST_BILLS)
        return self.db.select_many(
            "bill_reminders",
            filters={"family_id": actor.family_id},
            order_by="reminder_date",
            descending=True,
            limit=100,
        )

    def record_reminders(self, family_id: str, today: date | None = None) -> int:
        """Store one reminder per upcoming bill for ``today``; returns rows created."""
        reminder_date = (today or utc_today()).isoformat()
        created = 0
        for bill in self.upcoming(family_id, today=today):
            existing = self.db.select_many(
                "bill_reminders",
                filters={"bill_id": str(bill["id"]), "reminder_date": reminder_date},
                columns="id",
                limit=1,
            )
            if existing:
                continue
            self.db.insert_one(
                "bill_reminders",
                {
                    "family_id": family_id,
                    "bill_id": str(bill["id"]),
                    "due_date": str(bill["due_date"])[:10],
                    "reminder_date": reminder_date,
                },
            )
            created += 1
        return created
