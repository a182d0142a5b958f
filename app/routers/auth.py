"""Authentication endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from app.dependencies import get_authenticated_user, get_current_actor, get_db_client
from app.services.common import SupabaseService
from app.services.permissions import Actor, effective_capabilities, has_full_access
from supabase import Client

router = APIRouter()


@router.get("/session")
def auth_session(user: Any = Depends(get_authenticated_user)) -> dict:
    """Return the currently authenticated user."""
    return {"user": user}


@router.get("/me")
def auth_me(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the caller's member record and effective capabilities."""
    member = SupabaseService(client).get_member(actor.id) or {}
    return {
        "member": {
            "id": actor.id,
            "name": member.get("name", actor.name),
            "email": member.get("email"),
            "role": actor.role,
            "family_id": actor.family_id,
        },
        "full_access": has_full_access(actor),
        "capabilities": effective_capabilities(actor),
    }


@router.post("/signout")
def auth_signout() -> dict:
    """Return success for stateless sign-out handling."""
    return {"success": True}
