"""API router package."""

from app.routers import analytics, auth, bills, debts, expenses, families, members, savings

__all__ = [
    "analytics",
    "auth",
    "bills",
    "debts",
    "expenses",
    "families",
    "members",
    "savings",
]
