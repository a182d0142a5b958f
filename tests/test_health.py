"""Basic app health endpoint tests."""

from __future__ import annotations

from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient) -> None:
    """Health endpoint should return status and version."""
    response = client.get("/health")
    assert response.status_code == 200

    payload = response.json()
    assert payload["status"] == "ok"
    assert isinstance(payload["version"], str)


def test_protected_route_requires_bearer_token(client: TestClient) -> None:
    """Requests without credentials get the standard 401 shape."""
    response = client.get("/expenses")
    assert response.status_code == 401
    assert response.json() == {"error": "Missing authorization header", "code": "UNAUTHORIZED"}
