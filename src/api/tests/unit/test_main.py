"""Unit tests for main FastAPI application configuration."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from infrastructure.database.dependencies import get_read_session


@pytest.fixture
def app():
    from main import app

    yield app
    app.dependency_overrides.clear()


class TestHealthEndpoints:
    def test_health(self, app) -> None:
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_health_db_reports_connected(self, app) -> None:
        session = AsyncMock()
        app.dependency_overrides[get_read_session] = lambda: session

        response = TestClient(app).get("/health/db")

        assert response.json() == {"status": "ok", "connected": True}
        session.execute.assert_awaited_once()

    def test_health_db_reports_failure(self, app) -> None:
        session = AsyncMock()
        session.execute.side_effect = OSError("connection refused")
        app.dependency_overrides[get_read_session] = lambda: session

        response = TestClient(app).get("/health/db")

        body = response.json()
        assert body["status"] == "error"
        assert body["connected"] is False
        assert "connection refused" in body["error"]


class TestApplicationWiring:
    def test_org_routes_are_mounted(self, app) -> None:
        paths = app.openapi()["paths"]

        assert "/api/groups" in paths
        assert "/api/groups/{group_id}/children" in paths
        assert "/api/users/{person_id}/assign/{group_id}" in paths

    def test_request_validation_errors_are_400(self, app) -> None:
        response = TestClient(app).post("/api/groups", json={})

        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "validation_error"

    def test_lifespan_configures_logging_and_disposes_engines(self, app) -> None:
        with (
            patch("main.configure_logging") as configure_logging,
            patch("main.close_database_connections", new=AsyncMock()) as close,
        ):
            with TestClient(app):
                configure_logging.assert_called_once()

        close.assert_awaited_once()
