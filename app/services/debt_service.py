"""Informal debts and their append-only repayment ledger."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from app.services.common import SupabaseService
from app.services.permissions import Action, Actor, ensure_allowed
from app.utils.errors import InvalidInputError
from app.utils.money import ZERO, to_decimal
from app.utils.time import now_utc
from supabase import Client


@dataclass(frozen=True)
class Repayment:
    """One partial repayment."""

    date: str
    amount: Decimal
    note: str = ""

    def to_row(self) -> dict[str, Any]:
        return {"date": self.date, "amount": str(self.amount), "note": self.note}


class Ledger:
    """Immutable sequence of repayments; ``append`` is the only mutator."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Repayment] = ()) -> None:
        self._entries: tuple[Repayment, ...] = tuple(entries)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]] | None) -> Ledger:
        return cls(
            Repayment(
                date=str(row.get("date") or ""),
                amount=to_decimal(row.get("amount")),
                note=str(row.get("note") or ""),
            )
            for row in rows or ()
        )

    def append(self, entry: Repayment) -> Ledger:
        """Return a new ledger with ``entry`` added at the end."""
        if entry.amount < 0:
            raise InvalidInputError("Repayment amount cannot be negative")
        return Ledger((*self._entries, entry))

    def total(self) -> Decimal:
        return sum((entry.amount for entry in self._entries), ZERO)

    def to_rows(self) -> list[dict[str, Any]]:
        return [entry.to_row() for entry in self._entries]

    def __iter__(self) -> Iterator[Repayment]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(frozen=True)
class DebtBalance:
    """Ledger-derived balance of a debt."""

    paid: Decimal
    remaining: Decimal

    @property
    def outstanding(self) -> Decimal:
        """Amount that counts toward pending debt; never negative."""
        return max(ZERO, self.remaining)


def net_debt(debt: Mapping[str, Any]) -> DebtBalance:
    """Net a debt's principal against its repayment ledger.

    ``remaining`` goes negative on overpayment. The manual ``repaid`` flag is
    ignored.
    """
    paid = Ledger.from_rows(debt.get("ledger")).total()
    return DebtBalance(paid=paid, remaining=to_decimal(debt.get("amount")) - paid)


def with_balance(debt: dict[str, Any]) -> dict[str, Any]:
    """Attach ``paid``/``remaining`` and the public ``from``/``to`` labels to a debt row."""
    balance = net_debt(debt)
    return {
        **debt,
        "from": debt.get("from_party"),
        "to": debt.get("to_party"),
        "ledger": debt.get("ledger") or [],
        "paid": balance.paid,
        "remaining": balance.remaining,
    }


class DebtService:
    """Create, list, repay, and delete family debts."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def _get(self, family_id: str, debt_id: str) -> dict[str, Any]:
        return self.db.select_one(
            "debts", {"id": debt_id, "family_id": family_id}, not_found_label="Debt"
        )

    def list_debts(self, actor: Actor) -> list[dict[str, Any]]:
        """Return family debts ordered by due date, with balances."""
        ensure_allowed(actor, Action.LIST_DEBTS)
        rows = self.db.select_many(
            "debts", filters={"family_id": actor.family_id}, order_by="due_date"
        )
        return [with_balance(row) for row in rows]

    def create(
        self,
        actor: Actor,
        from_party: str,
        to_party: str,
        amount: Decimal,
        purpose: str = "",
        due_date: str | None = None,
    ) -> dict[str, Any]:
        """Record a new debt with an empty ledger."""
        ensure_allowed(actor, Action.ADD_DEBT)
        debt = self.db.insert_one(
            "debts",
            {
                "family_id": actor.family_id,
                "created_by": actor.id,
                "from_party": from_party,
                "to_party": to_party,
                "amount": str(amount),
                "purpose": purpose,
                "due_date": due_date,
                "repaid": False,
                "ledger": [],
            },
        )
        return with_balance(debt)

    def repay(
        self,
        actor: Actor,
        debt_id: str,
        amount: Decimal,
        note: str = "",
        paid_at: str | None = None,
    ) -> dict[str, Any]:
        """Append one repayment to the debt's ledger."""
        ensure_allowed(actor, Action.REPAY_DEBT)
        debt = self._get(actor.family_id, debt_id)
        ledger = Ledger.from_rows(debt.get("ledger")).append(
            Repayment(date=paid_at or now_utc().isoformat(), amount=amount, note=note)
        )
        rows = self.db.update(
            "debts",
            {"id": debt_id, "family_id": actor.family_id},
            {"ledger": ledger.to_rows()},
        )
        return with_balance(rows[0] if rows else {**debt, "ledger": ledger.to_rows()})

    def mark_repaid(self, actor: Actor, debt_id: str) -> dict[str, Any]:
        """Set the manual repaid flag without touching the ledger."""
        ensure_allowed(actor, Action.MARK_DEBT_REPAID)
        debt = self._get(actor.family_id, debt_id)
        rows = self.db.update(
            "debts", {"id": debt_id, "family_id": actor.family_id}, {"repaid": True}
        )
        return with_balance(rows[0] if rows else {**debt, "repaid": True})

    def delete(self, actor: Actor, debt_id: str) -> None:
        """Delete a debt in the actor's family."""
        ensure_allowed(actor, Action.DELETE_DEBT)
        self._get(actor.family_id, debt_id)
        self.db.delete("debts", {"id": debt_id, "family_id": actor.family_id})
