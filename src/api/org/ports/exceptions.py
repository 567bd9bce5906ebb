"""Domain exceptions for the organization bounded context.

Every error raised by the hierarchy and assignment services is an
``OrgError`` carrying a ``kind`` plus the offending field or entity id, so
the presentation layer can map it to a transport status without parsing
messages.
"""

from __future__ import annotations


class OrgError(Exception):
    """Base class for organization context errors."""

    kind = "org_error"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        entity_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.entity_id = entity_id

    def as_dict(self) -> dict[str, str]:
        """Structured form for error responses and log events."""
        detail = {"kind": self.kind, "message": self.message}
        if self.field is not None:
            detail["field"] = self.field
        if self.entity_id is not None:
            detail["entity_id"] = self.entity_id
        return detail


class ValidationError(OrgError, ValueError):
    """Raised when input is malformed or a required field is missing.

    Covers the person id format, blank names, negative clearance and
    unknown attributes in create/update payloads.
    """

    kind = "validation_error"


class ConflictError(OrgError):
    """Raised when creating an entity whose id already exists."""

    kind = "conflict"


class NotFoundError(OrgError):
    """Raised when a referenced group or person id does not resolve."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} {entity_id} not found", entity_id=entity_id)
        self.entity = entity


class CycleError(OrgError):
    """Raised when an adoption would make a group its own descendant.

    The tree must stay a forest; the offending child id is reported as
    ``entity_id``.
    """

    kind = "cycle"

    def __init__(self, parent_id: str, child_id: str) -> None:
        super().__init__(
            f"Adopting group {child_id} under {parent_id} would create a cycle",
            entity_id=child_id,
        )
        self.parent_id = parent_id
        self.child_id = child_id


class InvariantError(OrgError):
    """Raised when an operation violates the one-direct-group precondition.

    For example, promoting a person to admin of a group they are not a
    direct member of.
    """

    kind = "invariant_violation"
