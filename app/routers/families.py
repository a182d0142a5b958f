"""Family registration endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from app.dependencies import (
    get_authenticated_user,
    get_current_actor,
    get_current_user_email,
    get_current_user_id,
    get_db_client,
)
from app.schemas.member import FamilyCreate
from app.services.member_service import FamilyService
from app.services.permissions import Actor
from supabase import Client

router = APIRouter()


@router.post("")
def register_family(
    payload: FamilyCreate,
    user: Any = Depends(get_authenticated_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Create a family with the caller as its admin."""
    service = FamilyService(client)
    return service.register(
        user_id=get_current_user_id(user),
        email=get_current_user_email(user),
        family_name=payload.family_name,
        name=payload.name,
    )


@router.get("/me")
def get_family(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the caller's family."""
    return {"family": FamilyService(client).get(actor)}
