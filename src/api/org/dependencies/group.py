from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.observability import ObservationContext
from org.application.observability import (
    DefaultGroupServiceProbe,
    DefaultSubtreeQueryProbe,
    GroupServiceProbe,
    SubtreeQueryProbe,
)
from org.application.services import GroupService, SubtreeQueryService
from org.dependencies.context import get_observation_context
from org.dependencies.person import get_group_repository, get_person_repository
from org.infrastructure.group_repository import GroupRepository
from org.infrastructure.person_repository import PersonRepository


def get_group_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> GroupServiceProbe:
    """Get GroupServiceProbe instance bound to the request context.

    Returns:
        DefaultGroupServiceProbe instance for observability
    """
    return DefaultGroupServiceProbe().with_context(context)


def get_subtree_query_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> SubtreeQueryProbe:
    return DefaultSubtreeQueryProbe().with_context(context)


def get_group_service(
    group_repo: Annotated[GroupRepository, Depends(get_group_repository)],
    person_repo: Annotated[PersonRepository, Depends(get_person_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_service_probe: Annotated[GroupServiceProbe, Depends(get_group_service_probe)],
) -> GroupService:
    """Get GroupService instance.

    Args:
        group_repo: Group repository (shares session via FastAPI dependency caching)
        person_repo: Person repository, used when a removed group releases members
        session: Database session for transaction management
        group_service_probe: Group service probe for observability

    Returns:
        GroupService instance
    """
    return GroupService(
        session=session,
        group_repository=group_repo,
        person_repository=person_repo,
        probe=group_service_probe,
    )


def get_subtree_query_service(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    probe: Annotated[SubtreeQueryProbe, Depends(get_subtree_query_probe)],
) -> SubtreeQueryService:
    """Get SubtreeQueryService instance on the read session.

    Returns:
        SubtreeQueryService instance
    """
    return SubtreeQueryService(
        session=session,
        group_repository=GroupRepository(session=session),
        person_repository=PersonRepository(session=session),
        probe=probe,
    )
