"""HTTP surface tests against the in-memory store."""

from __future__ import annotations


def test_child_denied_gets_forbidden_shape(api, family) -> None:
    """Denied actions return 403 with the standard error body."""
    response = api(family.child).post(
        "/expenses", json={"amount": 10, "category": "Food", "note": ""}
    )
    assert response.status_code == 403
    assert response.json() == {"error": "No permission to add expenses", "code": "FORBIDDEN"}


def test_non_positive_amount_is_invalid(api, family) -> None:
    """Amounts must be greater than zero."""
    client = api(family.admin)
    for amount in (0, -5):
        response = client.post("/expenses", json={"amount": amount, "category": "Food"})
        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_INPUT"


def test_child_lists_only_own_expenses(api, fake_client, family) -> None:
    """Without viewExpenses the listing narrows to the caller's records."""
    fake_client.seed(
        "expenses", family_id=family.id, user_id=family.admin.id, amount="5", date="2026-10-01"
    )
    fake_client.seed(
        "expenses", family_id=family.id, user_id=family.child.id, amount="7", date="2026-10-02"
    )
    response = api(family.child).get("/expenses")
    assert response.status_code == 200
    assert [row["user_id"] for row in response.json()["expenses"]] == [family.child.id]


def test_debt_round_trip_uses_from_and_to(api, family) -> None:
    """Debts accept and return ``from``/``to`` with ledger-derived balances."""
    client = api(family.admin)
    created = client.post("/debts", json={"from": "Papa", "to": "Rahul", "amount": 1000})
    assert created.status_code == 200
    debt = created.json()["debt"]
    assert (debt["from"], debt["to"]) == ("Papa", "Rahul")
    assert debt["ledger"] == []

    client.put(f"/debts/{debt['id']}/repay", json={"amount": 400, "note": "first"})
    repaid = client.put(f"/debts/{debt['id']}/repay", json={"amount": 350})
    body = repaid.json()["debt"]
    assert len(body["ledger"]) == 2
    assert float(body["paid"]) == 750
    assert float(body["remaining"]) == 250


def test_summary_payload_keys(api, family) -> None:
    """The summary exposes its fields under their public names."""
    response = api(family.admin).get("/analytics/summary", params={"month": "2026-10"})
    assert response.status_code == 200
    payload = response.json()
    assert set(payload) == {
        "totalMonthlyExpenses",
        "totalMonthlySavings",
        "categoryTotals",
        "memberTotals",
        "trend",
        "upcomingBills",
        "debtSummary",
    }
    assert payload["totalMonthlyExpenses"] == 0
    assert len(payload["trend"]) == 6
    assert payload["memberTotals"][family.child.id] == {"name": "B", "amount": 0}
    assert payload["debtSummary"] == {"pendingDebt": 0}


def test_summary_rejects_malformed_month(api, family) -> None:
    """Month labels must look like YYYY-MM."""
    response = api(family.admin).get("/analytics/summary", params={"month": "October"})
    assert response.status_code == 422


def test_child_cannot_view_summary(api, family) -> None:
    """Analytics is gated on viewAnalytics."""
    response = api(family.child).get("/analytics/summary")
    assert response.status_code == 403


def test_admin_grants_capability(api, family) -> None:
    """Granted capabilities take effect for the member."""
    admin = api(family.admin)
    response = admin.put(
        f"/members/{family.child.id}/permissions", json={"permissions": {"viewBills": True}}
    )
    assert response.status_code == 200
    assert response.json()["member"]["capabilities"]["viewBills"] is True


def test_summary_rejects_out_of_range_year(api, family) -> None:
    """Years with no representable month window are invalid input, not server errors."""
    client = api(family.admin)
    for month in ("0000-05", "9999-12"):
        response = client.get("/analytics/summary", params={"month": month})
        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_INPUT"
