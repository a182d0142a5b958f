"""Family registration and member administration."""

from __future__ import annotations

import logging
from typing import Any

from app.services.common import SupabaseService, clear_member_cache
from app.services.permissions import (
    Action,
    Actor,
    Role,
    ensure_allowed,
    full_capabilities,
    normalize_capabilities,
)
from app.utils.errors import ConflictError, InvalidInputError
from supabase import Client

logger = logging.getLogger(__name__)

MEMBER_COLUMNS = "id,name,email,role,family_id,capabilities,created_at"


class FamilyService:
    """Create a family and seed its admin member."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def register(self, user_id: str, email: str, family_name: str, name: str) -> dict[str, Any]:
        """Create a family owned by an authenticated user who has none yet."""
        if self.db.get_member(user_id) is not None:
            raise ConflictError("You already belong to a family")
        if self.db.select_many("members", filters={"email": email}, columns="id", limit=1):
            raise ConflictError("Email already exists")

        family = self.db.insert_one("families", {"name": family_name, "created_by": user_id})
        member = self.db.insert_one(
            "members",
            {
                "id": user_id,
                "name": name,
                "email": email,
                "role": Role.ADMIN.value,
                "family_id": str(family["id"]),
                "capabilities": full_capabilities(),
            },
        )
        clear_member_cache(user_id)
        logger.info("Registered family %s with admin %s", family["id"], user_id)
        return {"family": family, "member": member}

    def get(self, actor: Actor) -> dict[str, Any]:
        """Return the actor's family."""
        return self.db.select_one("families", {"id": actor.family_id}, not_found_label="Family")


class MemberService:
    """Member directory and admin-only member management."""

    def __init__(self, client: Client) -> None:
        self.client = client
        self.db = SupabaseService(client)

    def _get(self, family_id: str, member_id: str) -> dict[str, Any]:
        return self.db.select_one(
            "members",
            {"id": member_id, "family_id": family_id},
            columns=MEMBER_COLUMNS,
            not_found_label="Member",
        )

    def _ensure_email_free(self, email: str, member_id: str | None = None) -> None:
        rows = self.db.select_many("members", filters={"email": email}, columns="id", limit=1)
        if rows and str(rows[0]["id"]) != member_id:
            raise ConflictError("Email already exists")

    def _discard_login(self, user_id: str) -> None:
        try:
            self.client.auth.admin.delete_user(user_id)
        except Exception:
            logger.warning("Orphaned login %s could not be deleted", user_id, exc_info=True)

    def list_members(self, actor: Actor) -> list[dict[str, Any]]:
        """Return every member of the actor's family."""
        ensure_allowed(actor, Action.LIST_MEMBERS)
        members = self.db.family_members(actor.family_id)
        for member in members:
            member["capabilities"] = normalize_capabilities(member.get("capabilities"))
        return members

    def add_member(
        self,
        actor: Actor,
        name: str,
        email: str,
        password: str,
        role: str,
        capabilities: dict[str, bool] | None = None,
    ) -> dict[str, Any]:
        """Provision a login and a member row in the admin's family."""
        ensure_allowed(actor, Action.ADD_MEMBER)
        self._ensure_email_free(email)

        try:
            response = self.client.auth.admin.create_user(
                {"email": email, "password": password, "email_confirm": True}
            )
        except Exception as exc:
            raise InvalidInputError("Could not create a login for this member") from exc

        user_id = str(response.user.id)
        try:
            member = self.db.insert_one(
                "members",
                {
                    "id": user_id,
                    "name": name,
                    "email": email,
                    "role": role,
                    "family_id": actor.family_id,
                    "capabilities": normalize_capabilities(capabilities),
                },
            )
        except Exception:
            self._discard_login(user_id)
            raise
        logger.info("Member %s added to family %s by %s", member["id"], actor.family_id, actor.id)
        return member

    def update_member(
        self,
        actor: Actor,
        member_id: str,
        name: str | None = None,
        email: str | None = None,
        role: str | None = None,
        password: str | None = None,
    ) -> dict[str, Any]:
        """Update name, email and role; email and password changes reach the login too."""
        ensure_allowed(actor, Action.EDIT_MEMBER)
        member = self._get(actor.family_id, member_id)

        patch = {
            key: value
            for key, value in {"name": name, "email": email, "role": role}.items()
            if value
        }
        if email:
            self._ensure_email_free(email, member_id)

        credentials: dict[str, str] = {}
        if email and email != member.get("email"):
            credentials["email"] = email
        if password and password.strip():
            credentials["password"] = password
        if credentials:
            try:
                self.client.auth.admin.update_user_by_id(member_id, credentials)
            except Exception as exc:
                raise InvalidInputError("Could not update the member's login") from exc

        if not patch:
            return member
        rows = self.db.update("members", {"id": member_id, "family_id": actor.family_id}, patch)
        clear_member_cache(member_id)
        return rows[0] if rows else {**member, **patch}

    def update_capabilities(
        self, actor: Actor, member_id: str, changes: dict[str, bool]
    ) -> dict[str, Any]:
        """Merge capability flags into the member's stored set."""
        ensure_allowed(actor, Action.EDIT_PERMISSIONS)
        member = self._get(actor.family_id, member_id)

        merged = normalize_capabilities({**(member.get("capabilities") or {}), **changes})
        rows = self.db.update(
            "members",
            {"id": member_id, "family_id": actor.family_id},
            {"capabilities": merged},
        )
        clear_member_cache(member_id)
        return rows[0] if rows else {**member, "capabilities": merged}

    def remove_member(self, actor: Actor, member_id: str) -> None:
        """Remove a member; their expenses and savings stay on record."""
        ensure_allowed(actor, Action.REMOVE_MEMBER)
        self._get(actor.family_id, member_id)
        if member_id == actor.id:
            raise InvalidInputError("Admins cannot remove themselves")

        self.db.delete("members", {"id": member_id, "family_id": actor.family_id})
        clear_member_cache(member_id)
        try:
            self.client.auth.admin.delete_user(member_id)
        except Exception:
            logger.warning(
                "Login for removed member %s could not be deleted", member_id, exc_info=True
            )
