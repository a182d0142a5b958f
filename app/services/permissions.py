"""Capability model and access decision procedure.

Two tiers decide what an actor may do inside their family:

* Full-access roles (``admin`` and ``parent``, with ``member`` accepted as a
  legacy alias of ``parent``) bypass capability flags entirely. Managing other
  members is reserved for ``admin``.
* The restricted role (``child``) is opt-in per capability. Editing or
  deleting an expense or saving additionally requires owning the record.

``authorize`` never raises: it returns ``Allow`` or ``Deny(reason)`` and the
caller decides what to do with it (``ensure_allowed`` maps a denial onto
``ForbiddenError``).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from app.utils.errors import ForbiddenError

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Member roles stored on the ``members`` table."""

    ADMIN = "admin"
    PARENT = "parent"
    CHILD = "child"


FULL_ACCESS_ROLES = frozenset({Role.ADMIN.value, Role.PARENT.value, "member"})


class Capability(str, Enum):
    """Recognized capability flags, keyed by their stored names."""

    VIEW_EXPENSES = "viewExpenses"
    ADD_EXPENSES = "addExpenses"
    EDIT_EXPENSES = "editExpenses"
    DELETE_EXPENSES = "deleteExpenses"
    VIEW_SAVINGS = "viewSavings"
    ADD_SAVINGS = "addSavings"
    EDIT_SAVINGS = "editSavings"
    DELETE_SAVINGS = "deleteSavings"
    VIEW_BILLS = "viewBills"
    VIEW_DEBTS = "viewDebts"
    VIEW_ANALYTICS = "viewAnalytics"


def normalize_capabilities(raw: Mapping[str, Any] | None) -> dict[str, bool]:
    """Return a complete capability set; missing flags are False, unknown keys dropped."""
    source = raw or {}
    return {cap.value: bool(source.get(cap.value, False)) for cap in Capability}


def full_capabilities() -> dict[str, bool]:
    """Capability set with every flag granted."""
    return {cap.value: True for cap in Capability}


@dataclass(frozen=True)
class Actor:
    """Authenticated member on whose behalf an action runs."""

    id: str
    role: str
    family_id: str
    capabilities: Mapping[str, bool] = field(default_factory=dict)
    name: str = ""

    @classmethod
    def from_member(cls, row: Mapping[str, Any]) -> Actor:
        """Build an actor from a ``members`` row."""
        return cls(
            id=str(row["id"]),
            role=str(row.get("role") or Role.CHILD.value),
            family_id=str(row["family_id"]),
            capabilities=normalize_capabilities(row.get("capabilities")),
            name=str(row.get("name") or ""),
        )


def has_full_access(actor: Actor) -> bool:
    """True for roles that bypass capability checks."""
    return actor.role in FULL_ACCESS_ROLES


def has_capability(actor: Actor, name: Capability | str) -> bool:
    """Resolve one capability for an actor, honoring the full-access bypass."""
    if has_full_access(actor):
        return True
    key = name.value if isinstance(name, Capability) else name
    return bool((actor.capabilities or {}).get(key, False))


def effective_capabilities(actor: Actor) -> dict[str, bool]:
    """Capability set as the actor experiences it."""
    return {cap.value: has_capability(actor, cap) for cap in Capability}


class Action(str, Enum):
    """Gated actions; values read as the object of "No permission to ..."."""

    LIST_EXPENSES = "view expenses"
    ADD_EXPENSE = "add expenses"
    EDIT_EXPENSE = "edit this expense"
    DELETE_EXPENSE = "delete this expense"
    LIST_SAVINGS = "view savings"
    ADD_SAVING = "add savings"
    EDIT_SAVING = "edit this saving"
    DELETE_SAVING = "delete this saving"
    LIST_BILLS = "view bills"
    ADD_BILL = "add bills"
    PAY_BILL = "pay bills"
    DELETE_BILL = "delete bills"
    LIST_DEBTS = "view debts"
    ADD_DEBT = "add debts"
    REPAY_DEBT = "record debt repayments"
    MARK_DEBT_REPAID = "mark debts repaid"
    DELETE_DEBT = "delete debts"
    VIEW_ANALYTICS = "access analytics"
    LIST_MEMBERS = "view members"
    ADD_MEMBER = "add members"
    EDIT_MEMBER = "edit members"
    EDIT_PERMISSIONS = "edit member permissions"
    REMOVE_MEMBER = "remove members"


REQUIRED_CAPABILITY: dict[Action, Capability | None] = {
    Action.LIST_EXPENSES: Capability.VIEW_EXPENSES,
    Action.ADD_EXPENSE: Capability.ADD_EXPENSES,
    Action.EDIT_EXPENSE: Capability.EDIT_EXPENSES,
    Action.DELETE_EXPENSE: Capability.DELETE_EXPENSES,
    Action.LIST_SAVINGS: Capability.VIEW_SAVINGS,
    Action.ADD_SAVING: Capability.ADD_SAVINGS,
    Action.EDIT_SAVING: Capability.EDIT_SAVINGS,
    Action.DELETE_SAVING: Capability.DELETE_SAVINGS,
    Action.LIST_BILLS: Capability.VIEW_BILLS,
    Action.ADD_BILL: Capability.VIEW_BILLS,
    Action.PAY_BILL: Capability.VIEW_BILLS,
    Action.DELETE_BILL: Capability.VIEW_BILLS,
    Action.LIST_DEBTS: Capability.VIEW_DEBTS,
    Action.ADD_DEBT: Capability.VIEW_DEBTS,
    Action.REPAY_DEBT: Capability.VIEW_DEBTS,
    Action.MARK_DEBT_REPAID: Capability.VIEW_DEBTS,
    Action.DELETE_DEBT: Capability.VIEW_DEBTS,
    Action.VIEW_ANALYTICS: Capability.VIEW_ANALYTICS,
    Action.LIST_MEMBERS: None,
    Action.ADD_MEMBER: None,
    Action.EDIT_MEMBER: None,
    Action.EDIT_PERMISSIONS: None,
    Action.REMOVE_MEMBER: None,
}

ADMIN_ONLY_ACTIONS = frozenset(
    {Action.ADD_MEMBER, Action.EDIT_MEMBER, Action.EDIT_PERMISSIONS, Action.REMOVE_MEMBER}
)

OWNER_GATED_ACTIONS = frozenset(
    {Action.EDIT_EXPENSE, Action.DELETE_EXPENSE, Action.EDIT_SAVING, Action.DELETE_SAVING}
)


@dataclass(frozen=True)
class Allow:
    """The action may proceed."""

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Deny:
    """The action is rejected, with a reason suitable for the caller."""

    reason: str

    def __bool__(self) -> bool:
        return False


Decision = Allow | Deny

ALLOW = Allow()


def _denied(action: Action) -> Deny:
    return Deny(f"No permission to {action.value}")


def authorize(actor: Actor, action: Action, resource_owner_id: str | None = None) -> Decision:
    """Decide whether ``actor`` may perform ``action``.

    ``resource_owner_id`` is the owning member of the target record and only
    matters for owner-gated actions.
    """
    if action in ADMIN_ONLY_ACTIONS:
        return ALLOW if actor.role == Role.ADMIN.value else _denied(action)

    if has_full_access(actor):
        return ALLOW

    required = REQUIRED_CAPABILITY.get(action)
    if required is not None and not has_capability(actor, required):
        return _denied(action)

    if action in OWNER_GATED_ACTIONS:
        if resource_owner_id is None or str(resource_owner_id) != actor.id:
            return _denied(action)

    return ALLOW


def ensure_allowed(actor: Actor, action: Action, resource_owner_id: str | None = None) -> None:
    """Raise ForbiddenError when ``authorize`` denies the action."""
    decision = authorize(actor, action, resource_owner_id)
    if isinstance(decision, Deny):
        logger.info("Denied %s for member %s: %s", action.name, actor.id, decision.reason)
        raise ForbiddenError(decision.reason)


class ListScope(str, Enum):
    """Which records a listing returns."""

    FAMILY = "family"
    OWN = "own"


def list_scope(actor: Actor, action: Action) -> ListScope:
    """Shape an expense/saving listing instead of denying it.

    Actors allowed to list see the whole family; everyone else sees only the
    records they own.
    """
    if isinstance(authorize(actor, action), Allow):
        return ListScope.FAMILY
    return ListScope.OWN
