"""Service package exports with lazy loading."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS = {
    "AnalyticsService": "app.services.analytics_service",
    "BillService": "app.services.bill_service",
    "DebtService": "app.services.debt_service",
    "ExpenseService": "app.services.record_service",
    "FamilyService": "app.services.member_service",
    "MemberService": "app.services.member_service",
    "SavingService": "app.services.record_service",
    "SupabaseService": "app.services.common",
}

__all__ = sorted(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(_EXPORTS[name])
    return getattr(module, name)
