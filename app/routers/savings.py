"""Saving endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_current_actor, get_db_client
from app.schemas.records import SavingCreate, SavingUpdate
from app.services.permissions import Actor
from app.services.record_service import SavingService
from supabase import Client

router = APIRouter()


@router.get("")
def list_savings(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """List family savings, or only the caller's own without view access."""
    return {"savings": SavingService(client).list_records(actor)}


@router.post("")
def add_saving(
    payload: SavingCreate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Record a saving owned by the caller."""
    saving = SavingService(client).create(actor, payload.model_dump(mode="json"))
    return {"saving": saving}


@router.put("/{saving_id}")
def update_saving(
    saving_id: str,
    payload: SavingUpdate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Update a saving."""
    saving = SavingService(client).update(
        actor, saving_id, payload.model_dump(mode="json", exclude_none=True)
    )
    return {"saving": saving}


@router.delete("/{saving_id}")
def delete_saving(
    saving_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete a saving."""
    SavingService(client).delete(actor, saving_id)
    return {"message": "Saving deleted"}
