"""Protocol for person application service observability.

Defines the interface for domain probes that capture application-level
domain events for person lifecycle and group assignment operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class PersonServiceProbe(Protocol):
    """Domain probe for person application service operations."""

    def person_created(self, person_id: str) -> None:
        """Record that a person was created."""
        ...

    def person_updated(self, person_id: str, fields: list[str]) -> None:
        """Record that a person's profile was patched."""
        ...

    def person_assigned(
        self, person_id: str, group_id: str, previous_group_id: str | None
    ) -> None:
        """Record that a person was assigned (or transferred) to a group."""
        ...

    def person_promoted(self, person_id: str, group_id: str) -> None:
        """Record that a person became admin of their direct group."""
        ...

    def person_discharged(self, person_id: str, group_id: str | None) -> None:
        """Record that a person was discharged."""
        ...

    def person_removed(self, person_id: str, matched: int, deleted: int) -> None:
        """Record the outcome of a hard removal."""
        ...

    def operation_failed(self, operation: str, person_id: str, error: str) -> None:
        """Record that a person operation failed."""
        ...

    def with_context(self, context: ObservationContext) -> PersonServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultPersonServiceProbe:
    """Default implementation of PersonServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultPersonServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultPersonServiceProbe(logger=self._logger, context=context)

    def person_created(self, person_id: str) -> None:
        self._logger.info(
            "person_created",
            person_id=person_id,
            **self._get_context_kwargs(),
        )

    def person_updated(self, person_id: str, fields: list[str]) -> None:
        self._logger.info(
            "person_updated",
            person_id=person_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def person_assigned(
        self, person_id: str, group_id: str, previous_group_id: str | None
    ) -> None:
        self._logger.info(
            "person_assigned",
            person_id=person_id,
            group_id=group_id,
            previous_group_id=previous_group_id,
            **self._get_context_kwargs(),
        )

    def person_promoted(self, person_id: str, group_id: str) -> None:
        self._logger.info(
            "person_promoted",
            person_id=person_id,
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def person_discharged(self, person_id: str, group_id: str | None) -> None:
        self._logger.info(
            "person_discharged",
            person_id=person_id,
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def person_removed(self, person_id: str, matched: int, deleted: int) -> None:
        self._logger.info(
            "person_removed",
            person_id=person_id,
            matched=matched,
            deleted=deleted,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, person_id: str, error: str) -> None:
        self._logger.warning(
            "person_operation_failed",
            operation=operation,
            person_id=person_id,
            error=error,
            **self._get_context_kwargs(),
        )
