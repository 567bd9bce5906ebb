"""Fixtures for organization route tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from org.application.services import GroupService, PersonService, SubtreeQueryService


@pytest.fixture
def mock_group_service() -> AsyncMock:
    """Mock GroupService for testing."""
    return AsyncMock(spec=GroupService)


@pytest.fixture
def mock_person_service() -> AsyncMock:
    """Mock PersonService for testing."""
    return AsyncMock(spec=PersonService)


@pytest.fixture
def mock_subtree_service() -> AsyncMock:
    """Mock SubtreeQueryService for testing."""
    return AsyncMock(spec=SubtreeQueryService)


@pytest.fixture
def test_client(
    mock_group_service: AsyncMock,
    mock_person_service: AsyncMock,
    mock_subtree_service: AsyncMock,
) -> TestClient:
    """Create TestClient with mocked dependencies."""
    from org.dependencies.group import get_group_service, get_subtree_query_service
    from org.dependencies.person import get_person_service
    from org.presentation import router
    from org.presentation.errors import request_validation_handler

    app = FastAPI()

    app.dependency_overrides[get_group_service] = lambda: mock_group_service
    app.dependency_overrides[get_person_service] = lambda: mock_person_service
    app.dependency_overrides[get_subtree_query_service] = lambda: mock_subtree_service
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(router)

    return TestClient(app)
