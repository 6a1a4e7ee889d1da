"""Tests for the error envelope."""

import pytest
from fastapi.testclient import TestClient

from finance_dashboard.config import settings
from finance_dashboard.database import get_db
from finance_dashboard.main import app


def broken_db():
    raise RuntimeError("database is unreachable")
    yield


@pytest.fixture
def broken_client(auth_headers):
    app.dependency_overrides[get_db] = broken_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestServerErrors:
    """Test unhandled failures."""

    def test_generic_message(self, broken_client, auth_headers, monkeypatch):
        """Outside debug mode no internals are exposed."""
        monkeypatch.setattr(settings, "debug", False)
        response = broken_client.get("/api/analytics/summary", headers=auth_headers)
        assert response.status_code == 500
        assert response.json() == {"error": "Server Error", "message": "Something went wrong"}

    def test_debug_includes_stack(self, broken_client, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "debug", True)
        response = broken_client.get("/api/analytics/summary", headers=auth_headers)
        assert response.status_code == 500
        data = response.json()
        assert data["message"] == "database is unreachable"
        assert data["stack"]


class TestValidationErrors:
    """Test request validation failures."""

    def test_field_details(self, client, auth_headers):
        response = client.post(
            "/api/transactions",
            json={"description": "x", "amount": "abc", "type": "expense", "category": "Other"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Validation Error"
        assert data["message"] == "Invalid input data"
        assert data["details"][0]["field"] == "amount"
        assert data["details"][0]["message"]
