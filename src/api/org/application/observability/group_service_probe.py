"""Protocol for group application service observability.

Defines the interface for domain probes that capture application-level
domain events for hierarchy operations (creation, adoption, rename,
removal).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class GroupServiceProbe(Protocol):
    """Domain probe for group application service operations."""

    def group_created(self, group_id: str, name: str) -> None:
        """Record that a group was created."""
        ...

    def group_creation_failed(self, name: str | None, error: str) -> None:
        """Record that group creation failed."""
        ...

    def children_adopted(
        self, parent_id: str, child_ids: list[str], rewritten_count: int
    ) -> None:
        """Record that children were attached and their subtrees rewritten."""
        ...

    def adoption_failed(self, parent_id: str, child_ids: list[str], error: str) -> None:
        """Record that an adoption was rejected or rolled back."""
        ...

    def group_updated(self, group_id: str, rewritten_count: int) -> None:
        """Record that a group was updated."""
        ...

    def group_update_failed(self, group_id: str, error: str) -> None:
        """Record that a group update failed."""
        ...

    def group_removed(
        self, group_id: str, released_members: int, orphaned_children: int
    ) -> None:
        """Record that a group was removed."""
        ...

    def group_removal_failed(self, group_id: str, error: str) -> None:
        """Record that a group removal failed."""
        ...

    def with_context(self, context: ObservationContext) -> GroupServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGroupServiceProbe:
    """Default implementation of GroupServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultGroupServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultGroupServiceProbe(logger=self._logger, context=context)

    def group_created(self, group_id: str, name: str) -> None:
        self._logger.info(
            "group_created",
            group_id=group_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def group_creation_failed(self, name: str | None, error: str) -> None:
        self._logger.error(
            "group_creation_failed",
            name=name,
            error=error,
            **self._get_context_kwargs(),
        )

    def children_adopted(
        self, parent_id: str, child_ids: list[str], rewritten_count: int
    ) -> None:
        self._logger.info(
            "children_adopted",
            parent_id=parent_id,
            child_ids=child_ids,
            rewritten_count=rewritten_count,
            **self._get_context_kwargs(),
        )

    def adoption_failed(self, parent_id: str, child_ids: list[str], error: str) -> None:
        self._logger.warning(
            "adoption_failed",
            parent_id=parent_id,
            child_ids=child_ids,
            error=error,
            **self._get_context_kwargs(),
        )

    def group_updated(self, group_id: str, rewritten_count: int) -> None:
        self._logger.info(
            "group_updated",
            group_id=group_id,
            rewritten_count=rewritten_count,
            **self._get_context_kwargs(),
        )

    def group_update_failed(self, group_id: str, error: str) -> None:
        self._logger.warning(
            "group_update_failed",
            group_id=group_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def group_removed(
        self, group_id: str, released_members: int, orphaned_children: int
    ) -> None:
        self._logger.info(
            "group_removed",
            group_id=group_id,
            released_members=released_members,
            orphaned_children=orphaned_children,
            **self._get_context_kwargs(),
        )

    def group_removal_failed(self, group_id: str, error: str) -> None:
        self._logger.error(
            "group_removal_failed",
            group_id=group_id,
            error=error,
            **self._get_context_kwargs(),
        )
