"""Family and member schemas."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field

MemberRole = Literal["admin", "parent", "child"]


class FamilyCreate(BaseModel):
    """Request body for registering a family; the caller becomes its admin."""

    family_name: str = Field(..., min_length=1, max_length=80)
    name: str = Field(..., min_length=1, max_length=80)


class MemberCreate(BaseModel):
    """Request body for adding a member to the caller's family."""

    name: str = Field(..., min_length=1, max_length=80)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: MemberRole = "child"
    capabilities: dict[str, bool] = Field(default_factory=dict, alias="permissions")

    model_config = {"populate_by_name": True}


class MemberUpdate(BaseModel):
    """Partial update of member details; blank password leaves it unchanged."""

    name: str | None = Field(None, min_length=1, max_length=80)
    email: EmailStr | None = None
    role: MemberRole | None = None
    password: str | None = None


class CapabilityUpdate(BaseModel):
    """Capability flags to merge into a member's set."""

    capabilities: dict[str, bool] = Field(..., alias="permissions")

    model_config = {"populate_by_name": True}
