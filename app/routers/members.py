"""Member endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_current_actor, get_db_client
from app.schemas.member import CapabilityUpdate, MemberCreate, MemberUpdate
from app.services.member_service import MemberService
from app.services.permissions import Actor
from supabase import Client

router = APIRouter()


@router.get("")
def list_members(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """List members of the caller's family."""
    return {"members": MemberService(client).list_members(actor)}


@router.post("")
def add_member(
    payload: MemberCreate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Add a member to the family (admin only)."""
    member = MemberService(client).add_member(
        actor,
        name=payload.name,
        email=str(payload.email).lower(),
        password=payload.password,
        role=payload.role,
        capabilities=payload.capabilities,
    )
    return {"member": member}


@router.put("/{member_id}/permissions")
def update_permissions(
    member_id: str,
    payload: CapabilityUpdate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Merge capability flags into a member's set (admin only)."""
    member = MemberService(client).update_capabilities(actor, member_id, payload.capabilities)
    return {"member": member}


@router.put("/{member_id}")
def update_member(
    member_id: str,
    payload: MemberUpdate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Update member details (admin only)."""
    member = MemberService(client).update_member(
        actor,
        member_id,
        name=payload.name,
        email=str(payload.email).lower() if payload.email else None,
        role=payload.role,
        password=payload.password,
    )
    return {"message": "Member updated", "member": member}


@router.delete("/{member_id}")
def remove_member(
    member_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Remove a member (admin only); their records are kept."""
    MemberService(client).remove_member(actor, member_id)
    return {"message": "Member deleted"}
