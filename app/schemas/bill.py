"""Bill schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from app.schemas.records import LineItem


class BillCreate(BaseModel):
    """Request body for adding a bill."""

    category: str = Field(..., min_length=1, max_length=60)
    amount: Decimal = Field(..., gt=0)
    title: str = Field("", max_length=120)
    items: list[LineItem] = Field(default_factory=list)
    due_date: date | None = None
