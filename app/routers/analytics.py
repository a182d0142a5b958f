"""Analytics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_current_actor, get_db_client
from app.schemas.analytics import SummaryResponse
from app.services.analytics_service import AnalyticsService
from app.services.permissions import Actor
from supabase import Client

router = APIRouter()


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    month: str | None = Query(default=None, pattern=r"^\d{4}-\d{2}$"),
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the monthly family summary (defaults to the current month)."""
    return AnalyticsService(client).summarize(actor, month)
