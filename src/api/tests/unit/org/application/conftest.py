"""Fixtures wiring the organization services to in-memory repositories."""

from unittest.mock import create_autospec

import pytest

from fakes import (
    FakeSession,
    InMemoryGroupRepository,
    InMemoryPersonRepository,
    InMemoryStore,
)
from org.application.observability import (
    GroupServiceProbe,
    PersonServiceProbe,
    SubtreeQueryProbe,
)
from org.application.services import GroupService, PersonService, SubtreeQueryService


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def session(store) -> FakeSession:
    return FakeSession(store)


@pytest.fixture
def group_repository(store) -> InMemoryGroupRepository:
    return InMemoryGroupRepository(store)


@pytest.fixture
def person_repository(store) -> InMemoryPersonRepository:
    return InMemoryPersonRepository(store)


@pytest.fixture
def group_probe():
    """Create mock group service probe."""
    return create_autospec(GroupServiceProbe, instance=True)


@pytest.fixture
def person_probe():
    """Create mock person service probe."""
    return create_autospec(PersonServiceProbe, instance=True)


@pytest.fixture
def subtree_probe():
    """Create mock subtree query probe."""
    return create_autospec(SubtreeQueryProbe, instance=True)


@pytest.fixture
def group_service(session, group_repository, person_repository, group_probe):
    return GroupService(
        session=session,
        group_repository=group_repository,
        person_repository=person_repository,
        probe=group_probe,
    )


@pytest.fixture
def person_service(session, person_repository, group_repository, person_probe):
    return PersonService(
        session=session,
        person_repository=person_repository,
        group_repository=group_repository,
        probe=person_probe,
    )


@pytest.fixture
def subtree_service(session, group_repository, person_repository, subtree_probe):
    return SubtreeQueryService(
        session=session,
        group_repository=group_repository,
        person_repository=person_repository,
        probe=subtree_probe,
    )
