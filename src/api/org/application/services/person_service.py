"""Person application service for the organization bounded context.

Orchestrates the person lifecycle (create, patch, discharge, removal) and
the group assignment operations that keep ``Person.direct_group`` and
``Group.members``/``Group.admins`` in lock-step.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from org.application.observability import DefaultPersonServiceProbe, PersonServiceProbe
from org.application.unit_of_work import transaction
from org.application.validation import (
    as_utc,
    parse_new_person,
    parse_person_patch,
    resolve_group_id,
    resolve_person_id,
    validate_time_range,
)
from org.domain.aggregates import Group, Person
from org.domain.value_objects import (
    DischargeResult,
    GroupId,
    PersonId,
    RemovalResult,
)
from org.ports.exceptions import (
    ConflictError,
    InvariantError,
    NotFoundError,
    OrgError,
)
from org.ports.repositories import IGroupRepository, IPersonRepository


class PersonService:
    """Application service for persons and their group assignments.

    Manages database transactions. Every operation that touches a person
    and one or more groups locks the rows it changes and commits them
    together, so membership never ends up recorded on only one side.
    """

    def __init__(
        self,
        session: AsyncSession,
        person_repository: IPersonRepository,
        group_repository: IGroupRepository,
        probe: PersonServiceProbe | None = None,
    ):
        """Initialize PersonService with dependencies.

        Args:
            session: Database session for transaction management
            person_repository: Repository for person persistence
            group_repository: Repository for group persistence
            probe: Optional domain probe for observability
        """
        self._session = session
        self._person_repository = person_repository
        self._group_repository = group_repository
        self._probe = probe or DefaultPersonServiceProbe()

    async def create_user(self, fields: Mapping[str, Any]) -> Person:
        """Create a new, unassigned person.

        Args:
            fields: Person attributes; ``id``, ``first_name`` and
                ``last_name`` are required

        Returns:
            The created Person aggregate

        Raises:
            ValidationError: If the payload is malformed
            ConflictError: If a person with the same id already exists
        """
        person_label = str((fields or {}).get("id"))
        try:
            payload = parse_new_person(fields)
            person = Person.create(
                PersonId(payload.id),
                payload.first_name,
                payload.last_name,
                **payload.profile(),
            )

            async with transaction(self._session):
                if await self._person_repository.get_by_id(person.id) is not None:
                    raise ConflictError(
                        f"Person {person.id.value} already exists",
                        field="id",
                        entity_id=person.id.value,
                    )
                await self._person_repository.add(person)

            self._probe.person_created(person_id=person.id.value)
            return person

        except IntegrityError as e:
            # Unique key fired for a concurrent insert of the same id
            self._probe.operation_failed(
                operation="create", person_id=person_label, error=str(e.orig)
            )
            raise ConflictError(
                f"Person {person_label} already exists",
                field="id",
                entity_id=person_label,
            ) from e
        except OrgError as e:
            self._probe.operation_failed(
                operation="create", person_id=person_label, error=str(e)
            )
            raise

    async def get_user(self, person_id: str | PersonId) -> Person | None:
        """Get a person by id, discharged persons included.

        Returns:
            The Person aggregate, or None if not found or the id is malformed
        """
        resolved = (
            person_id if isinstance(person_id, PersonId) else resolve_person_id(person_id)
        )
        if resolved is None:
            return None
        async with transaction(self._session):
            return await self._person_repository.get_by_id(resolved)

    async def get_users(self) -> list[Person]:
        """List persons that have not been discharged, in creation order."""
        async with transaction(self._session):
            return await self._person_repository.list_alive()

    async def get_updated_from(self, start: datetime, end: datetime) -> list[Person]:
        """List persons modified strictly between two instants.

        Naive datetimes are read as UTC.

        Raises:
            ValidationError: If ``start`` is after ``end``
        """
        validate_time_range(start, end)
        async with transaction(self._session):
            return await self._person_repository.list_updated_between(
                as_utc(start), as_utc(end)
            )

    async def update_user(self, fields: Mapping[str, Any]) -> Person:
        """Patch a person's profile.

        Only provided, non-null attributes change. Identity, group placement
        and the discharged flag are not patchable here.

        Raises:
            ValidationError: If the id is missing or a value is invalid
            NotFoundError: If the person does not exist
        """
        person_label = str((fields or {}).get("id"))
        try:
            patch = parse_person_patch(fields)
            changes = patch.changes()

            async with transaction(self._session):
                person = await self._require_person(PersonId(patch.id))
                person.apply_changes(changes)
                await self._person_repository.save(person)

            self._probe.person_updated(person_id=person.id.value, fields=sorted(changes))
            return person

        except OrgError as e:
            self._probe.operation_failed(
                operation="update", person_id=person_label, error=str(e)
            )
            raise

    async def assign(self, person_id: str, group_id: str) -> None:
        """Make a group the person's direct group.

        Transfers the person out of every group currently listing them
        (dropping admin rights there) and into the target's members.
        Re-assigning to the current group changes nothing.

        Raises:
            NotFoundError: If the person or group does not exist, or the
                person has been discharged
        """
        try:
            async with transaction(self._session):
                person = await self._require_person(person_id)
                if not person.alive:
                    raise NotFoundError("Person", person.id.value)
                target_id = resolve_group_id(group_id)
                locked = await self._lock_groups(person, target_id)
                target = locked.get(target_id) if target_id is not None else None
                if target is None:
                    raise NotFoundError("Group", str(group_id))

                previous = person.direct_group
                if previous == target.id and target.has_member(person.id):
                    return

                await self._release(person, locked.values(), keep=target.id)
                target.add_member(person.id)
                person.assign_to(target.id)
                await self._group_repository.save(target)
                await self._person_repository.save(person)

            self._probe.person_assigned(
                person_id=person.id.value,
                group_id=target.id.value,
                previous_group_id=previous.value if previous else None,
            )

        except OrgError as e:
            self._probe.operation_failed(
                operation="assign", person_id=str(person_id), error=str(e)
            )
            raise

    async def manage(self, person_id: str, group_id: str) -> None:
        """Promote a person to admin of their direct group.

        Raises:
            NotFoundError: If the person or group does not exist
            InvariantError: If the group is not the person's direct group
        """
        try:
            async with transaction(self._session):
                person = await self._require_person(person_id)
                group = await self._require_group(group_id)

                if person.direct_group != group.id:
                    raise InvariantError(
                        f"Person {person.id.value} is not a direct member of "
                        f"group {group.id.value}",
                        entity_id=person.id.value,
                    )

                # direct_group is authoritative; relist a missing member
                group.add_member(person.id)
                group.add_admin(person.id)
                await self._group_repository.save(group)

            self._probe.person_promoted(person_id=person.id.value, group_id=group.id.value)

        except OrgError as e:
            self._probe.operation_failed(
                operation="manage", person_id=str(person_id), error=str(e)
            )
            raise

    async def discharge(self, person_id: str) -> DischargeResult:
        """Mark a person discharged and strip them from every group.

        Discharging an already discharged person is allowed.

        Raises:
            NotFoundError: If the person does not exist
        """
        try:
            async with transaction(self._session):
                person = await self._require_person(person_id)
                previous = person.direct_group
                locked = await self._lock_groups(person)
                await self._release(person, locked.values())
                person.discharge()
                await self._person_repository.save(person)

            self._probe.person_discharged(
                person_id=person.id.value,
                group_id=previous.value if previous else None,
            )
            return DischargeResult(matched=1)

        except OrgError as e:
            self._probe.operation_failed(
                operation="discharge", person_id=str(person_id), error=str(e)
            )
            raise

    async def remove_user(self, person_id: str) -> RemovalResult:
        """Hard-delete a person after stripping them from every group.

        An absent or malformed id reports zero counts instead of failing.
        """
        resolved = resolve_person_id(person_id)
        if resolved is None:
            self._probe.person_removed(person_id=str(person_id), matched=0, deleted=0)
            return RemovalResult(matched=0, deleted=0)

        try:
            async with transaction(self._session):
                person = await self._person_repository.get_by_id(resolved, for_update=True)
                if person is None:
                    result = RemovalResult(matched=0, deleted=0)
                else:
                    locked = await self._lock_groups(person)
                    await self._release(person, locked.values())
                    deleted = await self._person_repository.delete(person.id)
                    result = RemovalResult(matched=1, deleted=deleted)

            self._probe.person_removed(
                person_id=resolved.value, matched=result.matched, deleted=result.deleted
            )
            return result

        except OrgError as e:
            self._probe.operation_failed(
                operation="remove", person_id=str(person_id), error=str(e)
            )
            raise

    async def _require_person(self, person_id: str | PersonId) -> Person:
        if isinstance(person_id, PersonId):
            resolved: PersonId | None = person_id
        else:
            resolved = resolve_person_id(person_id)
        person = None
        if resolved is not None:
            person = await self._person_repository.get_by_id(resolved, for_update=True)
        if person is None:
            raise NotFoundError("Person", str(person_id))
        return person

    async def _require_group(self, group_id: str | GroupId) -> Group:
        resolved = resolve_group_id(group_id)
        group = None
        if resolved is not None:
            group = await self._group_repository.get_by_id(resolved, for_update=True)
        if group is None:
            raise NotFoundError("Group", str(group_id))
        return group

    async def _lock_groups(
        self, person: Person, *extra: GroupId | None
    ) -> dict[GroupId, Group]:
        """Lock every group the operation may touch, in one id-ordered batch.

        Covers the groups listing the person, their direct group and
        ``extra``. The person row must already be locked: every membership
        change locks the person first, so the listing set cannot move
        underneath.
        """
        listing = await self._group_repository.find_listing_person(person.id)
        wanted = {group.id for group in listing}
        wanted.update(gid for gid in (person.direct_group, *extra) if gid is not None)
        groups = await self._group_repository.get_many(
            sorted(wanted, key=lambda gid: gid.value), for_update=True
        )
        return {group.id: group for group in groups}

    async def _release(
        self, person: Person, groups: Iterable[Group], keep: GroupId | None = None
    ) -> int:
        """Strip a person from every locked group listing them except ``keep``.

        Returns:
            Number of groups modified
        """
        released = 0
        for group in groups:
            if group.id == keep:
                continue
            if group.remove_member(person.id):
                await self._group_repository.save(group)
                released += 1
        return released
