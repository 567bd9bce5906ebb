"""Domain probe for organization repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to group and person persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class GroupRepositoryProbe(Protocol):
    """Domain probe for group repository operations."""

    def group_saved(self, group_id: str, created: bool) -> None:
        """Record that a group was inserted or overwritten."""
        ...

    def group_retrieved(self, group_id: str) -> None:
        """Record that a group was retrieved."""
        ...

    def group_not_found(self, group_id: str) -> None:
        """Record that a group was not found."""
        ...

    def groups_loaded(self, requested: int, found: int, locked: bool) -> None:
        """Record a batched load of one tree level."""
        ...

    def group_deleted(self, group_id: str) -> None:
        """Record that a group was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> GroupRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class PersonRepositoryProbe(Protocol):
    """Domain probe for person repository operations."""

    def person_saved(self, person_id: str, created: bool) -> None:
        """Record that a person was inserted or overwritten."""
        ...

    def person_retrieved(self, person_id: str) -> None:
        """Record that a person was retrieved."""
        ...

    def person_not_found(self, person_id: str) -> None:
        """Record that a person was not found."""
        ...

    def duplicate_person(self, person_id: str) -> None:
        """Record that an insert hit an existing id."""
        ...

    def person_deleted(self, person_id: str, deleted: int) -> None:
        """Record the outcome of a hard delete."""
        ...

    def with_context(self, context: ObservationContext) -> PersonRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGroupRepositoryProbe:
    """Default implementation of GroupRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultGroupRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultGroupRepositoryProbe(logger=self._logger, context=context)

    def group_saved(self, group_id: str, created: bool) -> None:
        self._logger.debug(
            "group_saved",
            group_id=group_id,
            created=created,
            **self._get_context_kwargs(),
        )

    def group_retrieved(self, group_id: str) -> None:
        self._logger.debug(
            "group_retrieved",
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def group_not_found(self, group_id: str) -> None:
        self._logger.debug(
            "group_not_found",
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def groups_loaded(self, requested: int, found: int, locked: bool) -> None:
        self._logger.debug(
            "groups_loaded",
            requested=requested,
            found=found,
            locked=locked,
            **self._get_context_kwargs(),
        )

    def group_deleted(self, group_id: str) -> None:
        self._logger.info(
            "group_deleted",
            group_id=group_id,
            **self._get_context_kwargs(),
        )


class DefaultPersonRepositoryProbe:
    """Default implementation of PersonRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultPersonRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultPersonRepositoryProbe(logger=self._logger, context=context)

    def person_saved(self, person_id: str, created: bool) -> None:
        self._logger.debug(
            "person_saved",
            person_id=person_id,
            created=created,
            **self._get_context_kwargs(),
        )

    def person_retrieved(self, person_id: str) -> None:
        self._logger.debug(
            "person_retrieved",
            person_id=person_id,
            **self._get_context_kwargs(),
        )

    def person_not_found(self, person_id: str) -> None:
        self._logger.debug(
            "person_not_found",
            person_id=person_id,
            **self._get_context_kwargs(),
        )

    def duplicate_person(self, person_id: str) -> None:
        self._logger.warning(
            "duplicate_person",
            person_id=person_id,
            **self._get_context_kwargs(),
        )

    def person_deleted(self, person_id: str, deleted: int) -> None:
        self._logger.info(
            "person_deleted",
            person_id=person_id,
            deleted=deleted,
            **self._get_context_kwargs(),
        )
