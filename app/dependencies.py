"""FastAPI dependency injection helpers."""

from __future__ import annotations

import threading
import time
from typing import Any

from fastapi import Depends, Header

from app.config import settings
from app.services.common import SupabaseService
from app.services.permissions import Actor
from app.utils.errors import ForbiddenError, UnauthorizedError
from app.utils.supabase_client import get_service_client, get_supabase_client
from supabase import Client

_token_cache: dict[str, tuple[float, Any]] = {}
_cache_lock = threading.Lock()


def _cache_get(key: str) -> Any | None:
    """Return a cached auth user when present and not expired."""
    now = time.monotonic()
    with _cache_lock:
        entry = _token_cache.get(key)
        if not entry:
            return None
        expires_at, value = entry
        if expires_at <= now:
            _token_cache.pop(key, None)
            return None
        return value


def _cache_set(key: str, value: Any) -> None:
    """Store a validated auth user with a bounded TTL cache."""
    if settings.auth_token_cache_ttl_seconds <= 0:
        return

    with _cache_lock:
        if len(_token_cache) >= max(1, settings.auth_token_cache_max_entries):
            oldest_key = next(iter(_token_cache))
            _token_cache.pop(oldest_key, None)
        _token_cache[key] = (time.monotonic() + settings.auth_token_cache_ttl_seconds, value)


def get_authenticated_user(authorization: str = Header(None)) -> Any:
    """Extract and validate a Supabase JWT from the Authorization header.

    Raises:
        UnauthorizedError: 401 if the header is missing, malformed, or
            the token cannot be validated.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing authorization header")

    token = authorization.split(" ", 1)[1]
    cached_user = _cache_get(token)
    if cached_user is not None:
        return cached_user

    supabase = get_supabase_client()

    try:
        response = supabase.auth.get_user(token)
        if not response or not response.user:
            raise UnauthorizedError("Invalid token")
        _cache_set(token, response.user)
        return response.user
    except UnauthorizedError:
        raise
    except Exception as exc:
        raise UnauthorizedError("Invalid or expired token") from exc


def get_current_user_id(user: Any) -> str:
    """Extract a stable user id string from the Supabase user object."""
    return str(user.id)


def get_current_user_email(user: Any) -> str:
    """Extract and normalize the authenticated user's email."""
    raw_email = getattr(user, "email", None)
    if not isinstance(raw_email, str) or not raw_email.strip():
        raise UnauthorizedError("Authenticated user email is required")
    return raw_email.strip().lower()


def get_db_client() -> Client:
    """Return the privileged Supabase client used by backend services."""
    return get_service_client()


def get_current_actor(
    user: Any = Depends(get_authenticated_user),
    client: Client = Depends(get_db_client),
) -> Actor:
    """Resolve the authenticated user to a family member actor."""
    member = SupabaseService(client).get_member(get_current_user_id(user))
    if member is None or not member.get("family_id"):
        raise ForbiddenError("You are not a member of any family")
    return Actor.from_member(member)
