"""Analytics summary schemas.

Field names follow the public summary payload and are serialized verbatim.
"""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, Field, PlainSerializer

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class MemberTotal(BaseModel):
    """Per-member spending in the summary month."""

    name: str
    amount: Money


class TrendPoint(BaseModel):
    """Expense total for one calendar month."""

    month: str
    total: Money


class DebtSummary(BaseModel):
    """Family-wide outstanding debt."""

    pendingDebt: Money


class SummaryResponse(BaseModel):
    """Monthly analytics snapshot."""

    totalMonthlyExpenses: Money
    totalMonthlySavings: Money
    categoryTotals: dict[str, Money]
    memberTotals: dict[str, MemberTotal]
    trend: list[TrendPoint] = Field(..., min_length=1)
    upcomingBills: list[dict[str, Any]]
    debtSummary: DebtSummary
