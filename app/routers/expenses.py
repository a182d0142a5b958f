"""Expense endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_current_actor, get_db_client
from app.schemas.records import ExpenseCreate, ExpenseUpdate
from app.services.permissions import Actor
from app.services.record_service import ExpenseService
from supabase import Client

router = APIRouter()


@router.get("")
def list_expenses(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """List family expenses, or only the caller's own without view access."""
    return {"expenses": ExpenseService(client).list_records(actor)}


@router.post("")
def add_expense(
    payload: ExpenseCreate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Record an expense owned by the caller."""
    expense = ExpenseService(client).create(actor, payload.model_dump(mode="json"))
    return {"expense": expense}


@router.put("/{expense_id}")
def update_expense(
    expense_id: str,
    payload: ExpenseUpdate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Update an expense."""
    expense = ExpenseService(client).update(
        actor, expense_id, payload.model_dump(mode="json", exclude_none=True)
    )
    return {"expense": expense}


@router.delete("/{expense_id}")
def delete_expense(
    expense_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete an expense."""
    ExpenseService(client).delete(actor, expense_id)
    return {"message": "Expense deleted"}
