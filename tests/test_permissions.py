"""Capability model and access decision tests."""

from __future__ import annotations

import pytest

from app.services.permissions import (
    Action,
    Actor,
    Allow,
    Capability,
    Deny,
    ListScope,
    authorize,
    effective_capabilities,
    ensure_allowed,
    has_capability,
    has_full_access,
    list_scope,
    normalize_capabilities,
)
from app.utils.errors import ForbiddenError


def _actor(role: str, member_id: str = "m1", **capabilities: bool) -> Actor:
    return Actor(id=member_id, role=role, family_id="f1", capabilities=capabilities)


@pytest.mark.parametrize(
    ("role", "expected"),
    [("admin", True), ("parent", True), ("member", True), ("child", False), ("guest", False)],
)
def test_has_full_access_by_role(role: str, expected: bool) -> None:
    """Only admin and the parent/member role bypass capability flags."""
    assert has_full_access(_actor(role)) is expected


def test_full_access_ignores_stored_flags() -> None:
    """Full-access actors hold every capability even with an empty set."""
    parent = _actor("parent")
    assert all(has_capability(parent, cap) for cap in Capability)
    assert all(effective_capabilities(parent).values())


def test_restricted_capability_reads_stored_flag() -> None:
    """Children get exactly what is stored; missing flags read as False."""
    child = _actor("child", viewBills=True)
    assert has_capability(child, Capability.VIEW_BILLS)
    assert has_capability(child, "viewBills")
    assert not has_capability(child, Capability.VIEW_DEBTS)


def test_absent_capability_set_is_all_false() -> None:
    """A member row without capabilities never raises."""
    child = Actor.from_member({"id": "c", "role": "child", "family_id": "f1"})
    assert child.capabilities == normalize_capabilities(None)
    assert not any(child.capabilities.values())
    assert isinstance(authorize(child, Action.LIST_BILLS), Deny)


def test_normalize_capabilities_drops_unknown_keys() -> None:
    """Normalization yields every recognized flag and nothing else."""
    normalized = normalize_capabilities({"viewExpenses": 1, "launchRockets": True})
    assert set(normalized) == {cap.value for cap in Capability}
    assert normalized["viewExpenses"] is True
    assert normalized["addSavings"] is False


@pytest.mark.parametrize(
    "action",
    [Action.ADD_MEMBER, Action.EDIT_MEMBER, Action.EDIT_PERMISSIONS, Action.REMOVE_MEMBER],
)
def test_member_management_is_admin_only(action: Action) -> None:
    """Parents have full access to records but cannot manage members."""
    assert isinstance(authorize(_actor("admin"), action), Allow)
    assert isinstance(authorize(_actor("parent"), action), Deny)
    assert isinstance(authorize(_actor("member"), action), Deny)
    fully_granted_child = _actor("child", **{cap.value: True for cap in Capability})
    assert isinstance(authorize(fully_granted_child, action), Deny)


def test_full_access_allows_editing_others_records() -> None:
    """Ownership never restricts admins and parents."""
    assert isinstance(authorize(_actor("parent"), Action.EDIT_EXPENSE, "someone-else"), Allow)
    assert isinstance(authorize(_actor("admin"), Action.DELETE_SAVING, "someone-else"), Allow)


def test_child_without_capability_is_denied_with_reason() -> None:
    """A missing capability produces a Deny naming the action."""
    decision = authorize(_actor("child"), Action.ADD_EXPENSE)
    assert decision == Deny("No permission to add expenses")
    assert not decision


def test_child_edit_requires_capability_even_for_own_expense() -> None:
    """Ownership is an additional restriction, never a substitute for the capability."""
    child = _actor("child", member_id="kid")
    assert isinstance(authorize(child, Action.EDIT_EXPENSE, "kid"), Deny)
    assert isinstance(authorize(child, Action.EDIT_EXPENSE, "other"), Deny)


def test_child_with_capability_limited_to_own_records() -> None:
    """With edit/delete granted, a child may only touch records they own."""
    child = _actor("child", member_id="kid", editExpenses=True, deleteSavings=True)
    assert isinstance(authorize(child, Action.EDIT_EXPENSE, "kid"), Allow)
    assert isinstance(authorize(child, Action.EDIT_EXPENSE, "other"), Deny)
    assert isinstance(authorize(child, Action.EDIT_EXPENSE), Deny)
    assert isinstance(authorize(child, Action.DELETE_SAVING, "kid"), Allow)
    assert isinstance(authorize(child, Action.DELETE_SAVING, "other"), Deny)


def test_bill_and_debt_capabilities_are_family_wide() -> None:
    """Bills and debts are not owner-gated beyond the capability."""
    child = _actor("child", viewBills=True, viewDebts=True)
    for action in (Action.PAY_BILL, Action.DELETE_BILL, Action.REPAY_DEBT, Action.DELETE_DEBT):
        assert isinstance(authorize(child, action, "someone-else"), Allow)
    assert isinstance(authorize(child, Action.VIEW_ANALYTICS), Deny)


def test_listing_members_needs_no_capability() -> None:
    """Every member may see who is in the family."""
    assert isinstance(authorize(_actor("child"), Action.LIST_MEMBERS), Allow)


def test_list_scope_shapes_results() -> None:
    """Listing expenses/savings narrows to own records instead of denying."""
    assert list_scope(_actor("admin"), Action.LIST_EXPENSES) is ListScope.FAMILY
    assert list_scope(_actor("child"), Action.LIST_EXPENSES) is ListScope.OWN
    viewer = _actor("child", viewExpenses=True)
    assert list_scope(viewer, Action.LIST_EXPENSES) is ListScope.FAMILY
    assert list_scope(viewer, Action.LIST_SAVINGS) is ListScope.OWN


def test_ensure_allowed_raises_forbidden() -> None:
    """A Deny becomes a 403 carrying its reason."""
    with pytest.raises(ForbiddenError) as exc_info:
        ensure_allowed(_actor("child"), Action.LIST_DEBTS)
    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "No permission to view debts"
    ensure_allowed(_actor("admin"), Action.LIST_DEBTS)
