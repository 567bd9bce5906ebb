"""Protocol for subtree query observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class SubtreeQueryProbe(Protocol):
    """Domain probe for read-side tree traversals."""

    def subtree_traversed(self, group_id: str, group_count: int, member_count: int) -> None:
        """Record a completed traversal."""
        ...

    def revisit_skipped(self, group_id: str, revisited_id: str) -> None:
        """Record that the visited-set guard stopped a repeated visit.

        A revisit means the stored tree is not a forest any more.
        """
        ...

    def dangling_child(self, group_id: str, child_id: str) -> None:
        """Record a ``children`` entry that does not resolve to a group."""
        ...

    def with_context(self, context: ObservationContext) -> SubtreeQueryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSubtreeQueryProbe:
    """Default implementation of SubtreeQueryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultSubtreeQueryProbe:
        return DefaultSubtreeQueryProbe(logger=self._logger, context=context)

    def subtree_traversed(self, group_id: str, group_count: int, member_count: int) -> None:
        self._logger.debug(
            "subtree_traversed",
            group_id=group_id,
            group_count=group_count,
            member_count=member_count,
            **self._get_context_kwargs(),
        )

    def revisit_skipped(self, group_id: str, revisited_id: str) -> None:
        self._logger.error(
            "subtree_revisit_skipped",
            group_id=group_id,
            revisited_id=revisited_id,
            **self._get_context_kwargs(),
        )

    def dangling_child(self, group_id: str, child_id: str) -> None:
        self._logger.warning(
            "subtree_dangling_child",
            group_id=group_id,
            child_id=child_id,
            **self._get_context_kwargs(),
        )
