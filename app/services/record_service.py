"""Member-owned transaction records (expenses and savings)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.services.common import SupabaseService
from app.services.permissions import Action, Actor, ListScope, ensure_allowed, list_scope
from app.utils.time import now_utc
from supabase import Client


@dataclass(frozen=True)
class RecordKind:
    """Table and gated actions for one kind of owned record."""

    table: str
    label: str
    list_action: Action
    add_action: Action
    edit_action: Action
    delete_action: Action


EXPENSES = RecordKind(
    table="expenses",
    label="Expense",
    list_action=Action.LIST_EXPENSES,
    add_action=Action.ADD_EXPENSE,
    edit_action=Action.EDIT_EXPENSE,
    delete_action=Action.DELETE_EXPENSE,
)

SAVINGS = RecordKind(
    table="savings",
    label="Saving",
    list_action=Action.LIST_SAVINGS,
    add_action=Action.ADD_SAVING,
    edit_action=Action.EDIT_SAVING,
    delete_action=Action.DELETE_SAVING,
)


class RecordService:
    """CRUD for records owned by the member who created them."""

    def __init__(self, client: Client, kind: RecordKind) -> None:
        self.db = SupabaseService(client)
        self.kind = kind

    def get(self, actor: Actor, record_id: str) -> dict[str, Any]:
        """Return one record in the actor's family."""
        return self.db.select_one(
            self.kind.table,
            {"id": record_id, "family_id": actor.family_id},
            not_found_label=self.kind.label,
        )

    def list_records(self, actor: Actor) -> list[dict[str, Any]]:
        """Return family records, or only the actor's own when not allowed to list."""
        filters: dict[str, Any] = {"family_id": actor.family_id}
        if list_scope(actor, self.kind.list_action) is ListScope.OWN:
            filters["user_id"] = actor.id
        return self.db.select_many(
            self.kind.table, filters=filters, order_by="date", descending=True
        )

    def create(self, actor: Actor, payload: dict[str, Any]) -> dict[str, Any]:
        """Record a new entry owned by the actor."""
        ensure_allowed(actor, self.kind.add_action)
        row = {
            **payload,
            "family_id": actor.family_id,
            "user_id": actor.id,
            "date": payload.get("date") or now_utc().isoformat(),
        }
        return self.db.insert_one(self.kind.table, row)

    def update(self, actor: Actor, record_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial update; fields that are None are left unchanged."""
        record = self.get(actor, record_id)
        ensure_allowed(actor, self.kind.edit_action, str(record["user_id"]))

        patch = {key: value for key, value in changes.items() if value is not None}
        if not patch:
            return record
        rows = self.db.update(
            self.kind.table, {"id": record_id, "family_id": actor.family_id}, patch
        )
        return rows[0] if rows else {**record, **patch}

    def delete(self, actor: Actor, record_id: str) -> None:
        """Delete one record after the ownership-aware check."""
        record = self.get(actor, record_id)
        ensure_allowed(actor, self.kind.delete_action, str(record["user_id"]))
        self.db.delete(self.kind.table, {"id": record_id, "family_id": actor.family_id})


class ExpenseService(RecordService):
    """Family expenses."""

    def __init__(self, client: Client) -> None:
        super().__init__(client, EXPENSES)


class SavingService(RecordService):
    """Money set aside by family members."""

    def __init__(self, client: Client) -> None:
        super().__init__(client, SAVINGS)
