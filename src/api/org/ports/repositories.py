"""Repository protocols (ports) for the organization bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. Implementations never commit: the calling service owns the
transaction, so several repository calls form a single atomic unit.

Every loader accepts ``for_update``. When set, implementations must lock
the returned rows until the surrounding transaction ends, so that two
operations touching the same group or person serialize instead of
interleaving their writes.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from org.domain.aggregates import Group, Person
from org.domain.value_objects import GroupId, PersonId


@runtime_checkable
class IGroupRepository(Protocol):
    """Repository for Group aggregate persistence.

    Groups live in a single keyed collection; tree structure is carried by
    the ``children`` and ``ancestors`` id arrays of each record.
    """

    async def save(self, group: Group) -> None:
        """Insert a new group or overwrite an existing one.

        Args:
            group: The Group aggregate to persist
        """
        ...

    async def get_by_id(self, group_id: GroupId, for_update: bool = False) -> Group | None:
        """Retrieve a group by its ID.

        Returns:
            The Group aggregate, or None if not found
        """
        ...

    async def get_many(
        self, group_ids: Sequence[GroupId], for_update: bool = False
    ) -> list[Group]:
        """Retrieve every group whose id is listed.

        Missing ids are silently skipped; callers compare lengths when they
        need all of them. Locks, when requested, are taken in id order.
        """
        ...

    async def find_parent(self, child_id: GroupId, for_update: bool = False) -> Group | None:
        """Find the group whose ``children`` list contains ``child_id``."""
        ...

    async def find_listing_person(
        self, person_id: PersonId, for_update: bool = False
    ) -> list[Group]:
        """Find every group listing the person in ``members`` or ``admins``."""
        ...

    async def list_all(self) -> list[Group]:
        """List all groups in creation order."""
        ...

    async def delete(self, group_id: GroupId) -> bool:
        """Delete a group record.

        Returns:
            True if deleted, False if not found
        """
        ...


@runtime_checkable
class IPersonRepository(Protocol):
    """Repository for Person aggregate persistence."""

    async def add(self, person: Person) -> None:
        """Insert a new person.

        Raises:
            ConflictError: If a person with the same id already exists
        """
        ...

    async def save(self, person: Person) -> None:
        """Overwrite an existing person record."""
        ...

    async def get_by_id(self, person_id: PersonId, for_update: bool = False) -> Person | None:
        """Retrieve a person by id, discharged or not.

        Returns:
            The Person aggregate, or None if not found
        """
        ...

    async def get_many(
        self, person_ids: Sequence[PersonId], for_update: bool = False
    ) -> list[Person]:
        """Retrieve every listed person in creation order.

        When locking, rows are locked and returned in id order instead.
        """
        ...

    async def list_alive(self) -> list[Person]:
        """List persons that have not been discharged, in creation order."""
        ...

    async def list_updated_between(self, start: datetime, end: datetime) -> list[Person]:
        """List persons with ``start < updated_at < end`` in creation order."""
        ...

    async def list_by_direct_group(
        self, group_id: GroupId, for_update: bool = False
    ) -> list[Person]:
        """List persons whose direct group is ``group_id``."""
        ...

    async def delete(self, person_id: PersonId) -> int:
        """Hard-delete a person.

        Returns:
            Number of deleted records (0 or 1)
        """
        ...
