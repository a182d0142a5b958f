"""Monthly family analytics.

``build_summary`` is a pure fold over already-fetched rows; it re-applies
every window itself, so it accepts any superset of the relevant records.
``AnalyticsService.summarize`` fetches those rows (in parallel) and folds
them. Nothing is cached: each call recomputes the snapshot from storage.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from app.config import settings
from app.services.common import SupabaseService
from app.services.debt_service import net_debt
from app.services.permissions import Action, Actor, ensure_allowed
from app.utils.errors import InvalidInputError
from app.utils.money import ZERO, to_decimal, total
from app.utils.time import (
    month_label,
    month_window,
    parse_iso_date,
    parse_month,
    parse_timestamp,
    trailing_months,
    utc_today,
)
from supabase import Client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryInputs:
    """Raw rows feeding one summary."""

    members: list[dict[str, Any]]
    expenses: list[dict[str, Any]]
    trend_expenses: list[dict[str, Any]]
    savings: list[dict[str, Any]]
    bills: list[dict[str, Any]]
    debts: list[dict[str, Any]]


def _in_window(row: dict[str, Any], start: datetime, end: datetime) -> bool:
    raw = row.get("date")
    if raw is None:
        return False
    return start <= parse_timestamp(raw) < end


def _window_rows(
    rows: Iterable[dict[str, Any]], start: datetime, end: datetime
) -> list[dict[str, Any]]:
    return [row for row in rows if _in_window(row, start, end)]


def category_totals(expenses: Iterable[dict[str, Any]]) -> dict[str, Decimal]:
    """Sum amounts per exact category label."""
    totals: dict[str, Decimal] = {}
    for expense in expenses:
        category = str(expense["category"])
        totals[category] = totals.get(category, ZERO) + to_decimal(expense["amount"])
    return totals


def member_totals(
    members: Iterable[dict[str, Any]], expenses: Iterable[dict[str, Any]]
) -> dict[str, dict[str, Any]]:
    """Spending per current member; every member appears, unknown owners are skipped."""
    totals: dict[str, dict[str, Any]] = {
        str(member["id"]): {"name": member.get("name") or "", "amount": ZERO}
        for member in members
    }
    for expense in expenses:
        entry = totals.get(str(expense.get("user_id")))
        if entry is not None:
            entry["amount"] += to_decimal(expense["amount"])
    return totals


def expense_trend(
    expenses: Iterable[dict[str, Any]], anchor: date, months: int = 6
) -> list[dict[str, Any]]:
    """Monthly expense totals for ``months`` calendar months ending at ``anchor``."""
    buckets = {month_label(year, month): ZERO for year, month in trailing_months(anchor, months)}
    for expense in expenses:
        raw = expense.get("date")
        if raw is None:
            continue
        when = parse_timestamp(raw)
        label = month_label(when.year, when.month)
        if label in buckets:
            buckets[label] += to_decimal(expense["amount"])
    return [{"month": label, "total": amount} for label, amount in buckets.items()]


def upcoming_bills(
    bills: Iterable[dict[str, Any]], today: date, window_days: int = 10
) -> list[dict[str, Any]]:
    """Unpaid bills due in ``[today, today + window_days]``, soonest first."""
    last_day = today + timedelta(days=window_days)
    due_soon = []
    for bill in bills:
        if bill.get("paid") or not bill.get("due_date"):
            continue
        due = parse_iso_date(str(bill["due_date"]))
        if today <= due <= last_day:
            due_soon.append((due, bill))
    due_soon.sort(key=lambda pair: pair[0])
    return [bill for _, bill in due_soon]


def pending_debt(debts: Iterable[dict[str, Any]]) -> Decimal:
    """Sum of ledger-derived outstanding balances, each clamped at zero."""
    return sum((net_debt(debt).outstanding for debt in debts), ZERO)


def build_summary(
    inputs: SummaryInputs,
    year: int,
    month: int,
    today: date,
    trend_months: int = 6,
    bill_window_days: int = 10,
) -> dict[str, Any]:
    """Fold raw rows into the monthly summary payload.

    The target month drives the expense, category, member and savings
    figures; the trend and upcoming bills are anchored to ``today``.
    """
    start, end = month_window(year, month)
    monthly_expenses = _window_rows(inputs.expenses, start, end)
    monthly_savings = _window_rows(inputs.savings, start, end)

    return {
        "totalMonthlyExpenses": total(monthly_expenses),
        "totalMonthlySavings": total(monthly_savings),
        "categoryTotals": category_totals(monthly_expenses),
        "memberTotals": member_totals(inputs.members, monthly_expenses),
        "trend": expense_trend(inputs.trend_expenses, today, trend_months),
        "upcomingBills": upcoming_bills(inputs.bills, today, bill_window_days),
        "debtSummary": {"pendingDebt": pending_debt(inputs.debts)},
    }


class AnalyticsService:
    """Fetch a family's records and compute the monthly summary."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def _fetch(self, family_id: str, year: int, month: int, today: date) -> SummaryInputs:
        start, end = month_window(year, month)
        trend_year, trend_month = trailing_months(today, settings.trend_months)[0]
        trend_start, _ = month_window(trend_year, trend_month)
        _, trend_end = month_window(today.year, today.month)
        filters = {"family_id": family_id}

        with ThreadPoolExecutor(max_workers=max(1, settings.summary_fetch_workers)) as pool:
            members = pool.submit(self.db.family_members, family_id)
            expenses = pool.submit(
                self.db.select_between,
                "expenses",
                filters,
                "date",
                start.isoformat(),
                end.isoformat(),
            )
            trend_expenses = pool.submit(
                self.db.select_between,
                "expenses",
                filters,
                "date",
                trend_start.isoformat(),
                trend_end.isoformat(),
            )
            savings = pool.submit(
                self.db.select_between,
                "savings",
                filters,
                "date",
                start.isoformat(),
                end.isoformat(),
            )
            bills = pool.submit(
                self.db.select_many,
                "bills",
                {"family_id": family_id, "paid": False},
                "*",
                "due_date",
            )
            debts = pool.submit(self.db.select_many, "debts", filters)

            return SummaryInputs(
                members=members.result(),
                expenses=expenses.result(),
                trend_expenses=trend_expenses.result(),
                savings=savings.result(),
                bills=bills.result(),
                debts=debts.result(),
            )

    def summarize(self, actor: Actor, month: str | None = None) -> dict[str, Any]:
        """Return the analytics summary for ``month`` (``YYYY-MM``, default current)."""
        ensure_allowed(actor, Action.VIEW_ANALYTICS)
        today = utc_today()
        try:
            year, month_number = parse_month(month, default=today)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        inputs = self._fetch(actor.family_id, year, month_number, today)
        summary = build_summary(
            inputs,
            year,
            month_number,
            today,
            trend_months=settings.trend_months,
            bill_window_days=settings.upcoming_bill_window_days,
        )
        logger.debug(
            "Summary for family %s %s: %s expenses, %s debts",
            actor.family_id,
            month_label(year, month_number),
            len(inputs.expenses),
            len(inputs.debts),
        )
        return summary
