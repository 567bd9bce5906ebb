"""Person aggregate for the organization context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from org.domain.value_objects import DEFAULT_RANK, GroupId, PersonId

# Profile attributes that may be patched after creation. Identity, group
# placement and the discharged flag each have their own operation.
PATCHABLE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "job",
        "mail",
        "phone",
        "rank",
        "address",
        "is_security_officer",
        "clearance",
    }
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Person:
    """Person aggregate representing an individual in the organization.

    A person is directly assigned to at most one group at a time. The
    ``direct_group`` field is a weak reference: it holds the group id only
    and is resolved through the group repository when needed.

    Business rules:
    - First and last name are mandatory and non-blank
    - Clearance is never negative
    - A discharged person keeps their record but cannot be assigned
    - Every mutation refreshes ``updated_at``
    """

    id: PersonId
    first_name: str
    last_name: str
    job: str | None = None
    mail: str | None = None
    phone: str | None = None
    rank: str = DEFAULT_RANK
    address: str | None = None
    is_security_officer: bool = False
    clearance: int = 0
    direct_group: GroupId | None = None
    alive: bool = True
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate business rules after initialization."""
        for label, value in (("first_name", self.first_name), ("last_name", self.last_name)):
            if not value or not value.strip():
                raise ValueError(f"Person {label} cannot be empty")
        if self.clearance < 0:
            raise ValueError("Person clearance cannot be negative")

    @classmethod
    def create(cls, person_id: PersonId, first_name: str, last_name: str, **profile: Any) -> Person:
        """Factory method for a new, unassigned person.

        Args:
            person_id: Externally supplied seven digit id
            first_name: Given name
            last_name: Family name
            **profile: Optional profile attributes (job, mail, rank, ...)

        Raises:
            ValueError: If a mandatory field is blank or an unknown attribute is given
        """
        unknown = set(profile) - PATCHABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown person attributes: {sorted(unknown)}")

        now = _utc_now()
        attributes = {k: v for k, v in profile.items() if v is not None}
        return cls(
            id=person_id,
            first_name=first_name,
            last_name=last_name,
            created_at=now,
            updated_at=now,
            **attributes,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def touch(self) -> None:
        """Refresh the modification timestamp."""
        self.updated_at = _utc_now()

    def apply_changes(self, changes: dict[str, Any]) -> None:
        """Patch profile attributes; ``None`` values leave a field untouched.

        Raises:
            ValueError: If a change targets a non-patchable attribute or
                would blank a mandatory name
        """
        forbidden = set(changes) - PATCHABLE_FIELDS
        if forbidden:
            raise ValueError(f"Cannot update person attributes: {sorted(forbidden)}")

        provided = {k: v for k, v in changes.items() if v is not None}
        for name in ("first_name", "last_name"):
            if name in provided and not str(provided[name]).strip():
                raise ValueError(f"Person {name} cannot be empty")
        if provided.get("clearance", 0) < 0:
            raise ValueError("Person clearance cannot be negative")

        for name, value in provided.items():
            setattr(self, name, value)
        self.touch()

    def assign_to(self, group_id: GroupId) -> None:
        """Point the direct group reference at a new group.

        Raises:
            ValueError: If the person has been discharged
        """
        if not self.alive:
            raise ValueError(f"Person {self.id} is discharged and cannot be assigned")
        if self.direct_group == group_id:
            return
        self.direct_group = group_id
        self.touch()

    def leave_group(self) -> None:
        """Clear the direct group reference."""
        if self.direct_group is None:
            return
        self.direct_group = None
        self.touch()

    def discharge(self) -> None:
        """Mark the person discharged and detach them from their group."""
        self.direct_group = None
        self.alive = False
        self.touch()
