"""Expense and saving schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class LineItem(BaseModel):
    """One itemized entry of an expense or bill (display only)."""

    name: str = Field(..., min_length=1, max_length=120)
    price: Decimal = Field(..., ge=0)


class ExpenseCreate(BaseModel):
    """Request body for recording an expense."""

    amount: Decimal = Field(..., gt=0)
    category: str = Field(..., min_length=1, max_length=60)
    note: str = Field("", max_length=500)
    date: datetime | None = None
    items: list[LineItem] = Field(default_factory=list)


class ExpenseUpdate(BaseModel):
    """Partial update of an expense; omitted fields are left unchanged."""

    amount: Decimal | None = Field(None, gt=0)
    category: str | None = Field(None, min_length=1, max_length=60)
    note: str | None = Field(None, max_length=500)
    date: datetime | None = None
    items: list[LineItem] | None = None


class SavingCreate(BaseModel):
    """Request body for recording money set aside."""

    amount: Decimal = Field(..., gt=0)
    note: str = Field("", max_length=500)
    date: datetime | None = None


class SavingUpdate(BaseModel):
    """Partial update of a saving."""

    amount: Decimal | None = Field(None, gt=0)
    note: str | None = Field(None, max_length=500)
    date: datetime | None = None
