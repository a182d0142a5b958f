"""Debt endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_current_actor, get_db_client
from app.schemas.debt import DebtCreate, RepaymentCreate
from app.services.debt_service import DebtService
from app.services.permissions import Actor
from supabase import Client

router = APIRouter()


@router.get("")
def list_debts(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """List family debts with paid and remaining balances."""
    return {"debts": DebtService(client).list_debts(actor)}


@router.post("")
def add_debt(
    payload: DebtCreate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Record a debt between two parties."""
    debt = DebtService(client).create(
        actor,
        from_party=payload.from_party,
        to_party=payload.to_party,
        amount=payload.amount,
        purpose=payload.purpose,
        due_date=payload.due_date.isoformat() if payload.due_date else None,
    )
    return {"debt": debt}


@router.put("/{debt_id}/repay")
def repay_debt(
    debt_id: str,
    payload: RepaymentCreate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Append a partial repayment to the debt's ledger."""
    debt = DebtService(client).repay(
        actor,
        debt_id,
        amount=payload.amount,
        note=payload.note,
        paid_at=payload.date.isoformat() if payload.date else None,
    )
    return {"debt": debt}


@router.put("/{debt_id}/mark-repaid")
def mark_debt_repaid(
    debt_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Flag a debt as repaid without changing its ledger."""
    return {"debt": DebtService(client).mark_repaid(actor, debt_id)}


@router.delete("/{debt_id}")
def delete_debt(
    debt_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete a debt."""
    DebtService(client).delete(actor, debt_id)
    return {"message": "Debt deleted"}
