"""Debt schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class DebtCreate(BaseModel):
    """Request body for recording an informal debt."""

    from_party: str = Field(..., alias="from", min_length=1, max_length=120)
    to_party: str = Field(..., alias="to", min_length=1, max_length=120)
    amount: Decimal = Field(..., gt=0)
    purpose: str = Field("", max_length=500)
    due_date: date | None = None

    model_config = {"populate_by_name": True}


class RepaymentCreate(BaseModel):
    """Request body for appending one partial repayment."""

    amount: Decimal = Field(..., gt=0)
    note: str = Field("", max_length=500)
    date: datetime | None = None
