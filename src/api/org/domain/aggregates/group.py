"""Group aggregate for the organization context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from org.domain.value_objects import GroupId, PersonId


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Group:
    """Group aggregate representing one unit of the organizational tree.

    The tree is expressed purely through ids: ``children`` lists the direct
    child groups and ``ancestors`` the chain from the root down to the
    immediate parent. ``hierarchy`` is the name-resolved form of
    ``ancestors`` followed by the group's own name.

    Business rules:
    - Group names must be 1-255 characters after trimming
    - A group never lists itself or a duplicate among its children
    - Admins are always a subset of members
    - Every mutation refreshes ``updated_at``

    The aggregate cannot see other groups, so keeping ``ancestors`` and
    ``hierarchy`` consistent across the tree is the job of the hierarchy
    service, which calls ``place_under`` for every group whose chain changed.
    """

    id: GroupId
    name: str
    type: str | None = None
    clearance: int = 0
    admins: list[PersonId] = field(default_factory=list)
    members: list[PersonId] = field(default_factory=list)
    children: list[GroupId] = field(default_factory=list)
    ancestors: list[GroupId] = field(default_factory=list)
    hierarchy: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate business rules after initialization."""
        self._validate_name(self.name)
        if self.clearance < 0:
            raise ValueError("Group clearance cannot be negative")
        if not self.hierarchy:
            self.hierarchy = [self.name]

    @staticmethod
    def _validate_name(name: str) -> None:
        if not name or not name.strip() or len(name) > 255:
            raise ValueError("Group name must be between 1 and 255 characters")

    @classmethod
    def create(
        cls,
        name: str,
        group_type: str | None = None,
        clearance: int = 0,
    ) -> Group:
        """Factory method for creating a new standalone group.

        A new group has no parent and no children; it only gains a position
        in the tree through adoption.

        Args:
            name: The name of the group
            group_type: Free-form classification tag
            clearance: Non-negative clearance level

        Returns:
            A new root Group with ``hierarchy == [name]``

        Raises:
            ValueError: If name is empty or clearance is negative
        """
        now = _utc_now()
        return cls(
            id=GroupId.generate(),
            name=name.strip(),
            type=group_type,
            clearance=clearance,
            hierarchy=[name.strip()],
            created_at=now,
            updated_at=now,
        )

    @property
    def parent_id(self) -> GroupId | None:
        """The immediate parent according to the ancestor chain."""
        return self.ancestors[-1] if self.ancestors else None

    def touch(self) -> None:
        """Refresh the modification timestamp."""
        self.updated_at = _utc_now()

    def has_ancestor(self, group_id: GroupId) -> bool:
        """Check whether a group appears in this group's ancestor chain."""
        return group_id in self.ancestors

    def has_child(self, group_id: GroupId) -> bool:
        return group_id in self.children

    def add_child(self, child_id: GroupId) -> None:
        """Append a child id, ignoring one that is already listed.

        Raises:
            ValueError: If the child is the group itself
        """
        if child_id == self.id:
            raise ValueError(f"Group {self.id} cannot be its own child")
        if child_id in self.children:
            return
        self.children.append(child_id)
        self.touch()

    def remove_child(self, child_id: GroupId) -> None:
        if child_id not in self.children:
            return
        self.children = [c for c in self.children if c != child_id]
        self.touch()

    def place_under(self, parent: Group | None) -> None:
        """Re-derive the ancestor chain and path from a (new) parent.

        Passing ``None`` turns the group into a root.
        """
        if parent is None:
            ancestors: list[GroupId] = []
            hierarchy = [self.name]
        else:
            if parent.id == self.id:
                raise ValueError(f"Group {self.id} cannot be placed under itself")
            ancestors = [*parent.ancestors, parent.id]
            hierarchy = [*parent.hierarchy, self.name]

        if ancestors != self.ancestors or hierarchy != self.hierarchy:
            self.ancestors = ancestors
            self.hierarchy = hierarchy
            self.touch()

    def rename(self, new_name: str) -> None:
        """Rename the group and the last entry of its own path.

        Raises:
            ValueError: If name is invalid
        """
        new_name = new_name.strip() if new_name else new_name
        self._validate_name(new_name)
        if new_name == self.name:
            return
        self.name = new_name
        self.hierarchy = [*self.hierarchy[:-1], new_name]
        self.touch()

    def reclassify(self, group_type: str | None) -> None:
        if group_type != self.type:
            self.type = group_type
            self.touch()

    def change_clearance(self, clearance: int) -> None:
        if clearance < 0:
            raise ValueError("Group clearance cannot be negative")
        if clearance != self.clearance:
            self.clearance = clearance
            self.touch()

    def has_member(self, person_id: PersonId) -> bool:
        return person_id in self.members

    def is_admin(self, person_id: PersonId) -> bool:
        return person_id in self.admins

    def add_member(self, person_id: PersonId) -> None:
        """Add a direct member. Adding an existing member is a no-op."""
        if person_id in self.members:
            return
        self.members.append(person_id)
        self.touch()

    def remove_member(self, person_id: PersonId) -> bool:
        """Remove a person from both members and admins.

        Returns:
            True if the person was listed in either collection
        """
        listed = person_id in self.members or person_id in self.admins
        if not listed:
            return False
        self.members = [m for m in self.members if m != person_id]
        self.admins = [a for a in self.admins if a != person_id]
        self.touch()
        return True

    def add_admin(self, person_id: PersonId) -> None:
        """Promote a direct member to admin (idempotent).

        Raises:
            ValueError: If the person is not a direct member
        """
        if person_id not in self.members:
            raise ValueError(
                f"Person {person_id} must be a member of group {self.id} "
                "before being promoted to admin"
            )
        if person_id in self.admins:
            return
        self.admins.append(person_id)
        self.touch()
