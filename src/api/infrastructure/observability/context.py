"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped and domain-relevant metadata that should be
    included with all instrumentation events.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        operation: Name of the use case being executed (if applicable).
        group_id: Group the operation is centered on (if applicable).
        person_id: Person the operation is centered on (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123").with_group(group_id)
        probe = DefaultGroupServiceProbe().with_context(context)
    """

    request_id: str | None = None
    operation: str | None = None
    group_id: str | None = None
    person_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean. Keys are prefixed
        with ``ctx_`` so they never collide with an event's own fields.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.operation is not None:
            result["ctx_operation"] = self.operation
        if self.group_id is not None:
            result["ctx_group_id"] = self.group_id
        if self.person_id is not None:
            result["ctx_person_id"] = self.person_id
        result.update(self.extra)
        return result

    def with_group(self, group_id: str) -> ObservationContext:
        return replace(self, group_id=group_id)

    def with_person(self, person_id: str) -> ObservationContext:
        return replace(self, person_id=person_id)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
