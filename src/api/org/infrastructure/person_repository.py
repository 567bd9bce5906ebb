"""PostgreSQL implementation of IPersonRepository."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from org.domain.aggregates import Person
from org.domain.value_objects import GroupId, PersonId
from org.infrastructure.models import PersonModel
from org.infrastructure.observability import (
    DefaultPersonRepositoryProbe,
    PersonRepositoryProbe,
)
from org.ports.exceptions import ConflictError
from org.ports.repositories import IPersonRepository


class PersonRepository(IPersonRepository):
    """PostgreSQL-backed repository for Person aggregates."""

    def __init__(
        self, session: AsyncSession, probe: PersonRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultPersonRepositoryProbe()

    async def add(self, person: Person) -> None:
        """Insert a new person.

        Flushes immediately so a duplicate id surfaces here rather than at
        commit time.

        Raises:
            ConflictError: If a person with the same id already exists
        """
        model = PersonModel(id=person.id.value, created_at=person.created_at)
        self._apply(model, person)
        self._session.add(model)

        try:
            await self._session.flush()
        except IntegrityError as e:
            self._probe.duplicate_person(person.id.value)
            raise ConflictError(
                f"Person {person.id.value} already exists",
                field="id",
                entity_id=person.id.value,
            ) from e

        self._probe.person_saved(person.id.value, created=True)

    async def save(self, person: Person) -> None:
        """Overwrite an existing person record (inserting it if missing)."""
        model = await self._session.get(PersonModel, person.id.value)
        created = model is None

        if model is None:
            model = PersonModel(id=person.id.value, created_at=person.created_at)
            self._session.add(model)

        self._apply(model, person)
        await self._session.flush()
        self._probe.person_saved(person.id.value, created=created)

    async def get_by_id(self, person_id: PersonId, for_update: bool = False) -> Person | None:
        """Retrieve a person by id, discharged or not.

        Returns:
            The Person aggregate, or None if not found
        """
        stmt = select(PersonModel).where(PersonModel.id == person_id.value)
        result = await self._session.execute(self._locking(stmt, for_update))
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.person_not_found(person_id.value)
            return None

        self._probe.person_retrieved(person_id.value)
        return self._to_domain(model)

    async def get_many(
        self, person_ids: Sequence[PersonId], for_update: bool = False
    ) -> list[Person]:
        """Retrieve every listed person.

        Rows come back in creation order, or in id order when locking so
        that concurrent transactions acquire person locks in the same order.
        """
        if not person_ids:
            return []

        ordering = (
            (PersonModel.id,) if for_update else (PersonModel.created_at, PersonModel.id)
        )
        stmt = (
            select(PersonModel)
            .where(PersonModel.id.in_([p.value for p in person_ids]))
            .order_by(*ordering)
        )
        result = await self._session.execute(self._locking(stmt, for_update))
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_alive(self) -> list[Person]:
        """List persons that have not been discharged, in creation order."""
        stmt = (
            select(PersonModel)
            .where(PersonModel.alive.is_(True))
            .order_by(PersonModel.created_at, PersonModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_updated_between(self, start: datetime, end: datetime) -> list[Person]:
        """List persons with ``start < updated_at < end`` in creation order."""
        stmt = (
            select(PersonModel)
            .where(PersonModel.updated_at > start, PersonModel.updated_at < end)
            .order_by(PersonModel.created_at, PersonModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_by_direct_group(
        self, group_id: GroupId, for_update: bool = False
    ) -> list[Person]:
        """List persons whose direct group is ``group_id``."""
        stmt = (
            select(PersonModel)
            .where(PersonModel.direct_group_id == group_id.value)
            .order_by(PersonModel.id)
        )
        result = await self._session.execute(self._locking(stmt, for_update))
        return [self._to_domain(m) for m in result.scalars().all()]

    async def delete(self, person_id: PersonId) -> int:
        """Hard-delete a person.

        Returns:
            Number of deleted records (0 or 1)
        """
        stmt = delete(PersonModel).where(PersonModel.id == person_id.value)
        result = await self._session.execute(stmt)
        deleted = result.rowcount

        self._probe.person_deleted(person_id.value, deleted=deleted)
        return deleted

    @staticmethod
    def _locking(stmt: Select, for_update: bool) -> Select:
        if not for_update:
            return stmt
        return stmt.with_for_update().execution_options(populate_existing=True)

    @staticmethod
    def _apply(model: PersonModel, person: Person) -> None:
        model.first_name = person.first_name
        model.last_name = person.last_name
        model.job = person.job
        model.mail = person.mail
        model.phone = person.phone
        model.rank = person.rank
        model.address = person.address
        model.is_security_officer = person.is_security_officer
        model.clearance = person.clearance
        model.direct_group_id = person.direct_group.value if person.direct_group else None
        model.alive = person.alive
        model.updated_at = person.updated_at

    def _to_domain(self, model: PersonModel) -> Person:
        """Convert a PersonModel to a Person domain aggregate."""
        return Person(
            id=PersonId(value=model.id),
            first_name=model.first_name,
            last_name=model.last_name,
            job=model.job,
            mail=model.mail,
            phone=model.phone,
            rank=model.rank,
            address=model.address,
            is_security_officer=model.is_security_officer,
            clearance=model.clearance,
            direct_group=(
                GroupId(value=model.direct_group_id) if model.direct_group_id else None
            ),
            alive=model.alive,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
