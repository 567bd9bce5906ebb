from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from infrastructure.observability import ObservationContext
from org.application.observability import (
    DefaultPersonServiceProbe,
    PersonServiceProbe,
)
from org.application.services import PersonService
from org.dependencies.context import get_observation_context
from org.infrastructure.group_repository import GroupRepository
from org.infrastructure.person_repository import PersonRepository


def get_person_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> PersonServiceProbe:
    """Get PersonServiceProbe instance bound to the request context.

    Returns:
        DefaultPersonServiceProbe instance for observability
    """
    return DefaultPersonServiceProbe().with_context(context)


def get_person_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> PersonRepository:
    """Get PersonRepository instance.

    Args:
        session: Async database session

    Returns:
        PersonRepository instance
    """
    return PersonRepository(session=session)


def get_group_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> GroupRepository:
    """Get GroupRepository instance.

    Args:
        session: Async database session

    Returns:
        GroupRepository instance
    """
    return GroupRepository(session=session)


def get_person_service(
    person_repo: Annotated[PersonRepository, Depends(get_person_repository)],
    group_repo: Annotated[GroupRepository, Depends(get_group_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    person_service_probe: Annotated[
        PersonServiceProbe, Depends(get_person_service_probe)
    ],
) -> PersonService:
    """Get PersonService instance.

    Both repositories share the request's write session through FastAPI
    dependency caching, so assignment cascades commit atomically.

    Args:
        person_repo: Person repository
        group_repo: Group repository
        session: Database session for transaction management
        person_service_probe: Person service probe for observability

    Returns:
        PersonService instance
    """
    return PersonService(
        session=session,
        person_repository=person_repo,
        group_repository=group_repo,
        probe=person_service_probe,
    )
