"""Bill endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_current_actor, get_db_client
from app.schemas.bill import BillCreate
from app.services.bill_service import BillService
from app.services.permissions import Actor
from supabase import Client

router = APIRouter()


@router.get("")
def list_bills(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """List family bills ordered by due date."""
    return {"bills": BillService(client).list_bills(actor)}


@router.post("")
def add_bill(
    payload: BillCreate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Add an unpaid bill."""
    return {"bill": BillService(client).create(actor, payload.model_dump(mode="json"))}


@router.get("/reminders")
def list_reminders(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return stored due-soon reminders."""
    return {"reminders": BillService(client).reminders(actor)}


@router.put("/{bill_id}/pay")
def pay_bill(
    bill_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Mark a bill paid."""
    return {"bill": BillService(client).mark_paid(actor, bill_id)}


@router.delete("/{bill_id}")
def delete_bill(
    bill_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete a bill."""
    BillService(client).delete(actor, bill_id)
    return {"message": "Bill deleted"}
