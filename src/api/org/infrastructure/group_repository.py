"""PostgreSQL implementation of IGroupRepository.

The repository never commits; the calling service owns the transaction.
Locked loads use ``SELECT ... FOR UPDATE`` with ``populate_existing`` so a
row that is already in the session's identity map is refreshed from the
locked read instead of served from memory.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import Select, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from org.domain.aggregates import Group
from org.domain.value_objects import GroupId, PersonId
from org.infrastructure.models import GroupModel
from org.infrastructure.observability import (
    DefaultGroupRepositoryProbe,
    GroupRepositoryProbe,
)
from org.ports.repositories import IGroupRepository


class GroupRepository(IGroupRepository):
    """PostgreSQL-backed repository for Group aggregates."""

    def __init__(
        self, session: AsyncSession, probe: GroupRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultGroupRepositoryProbe()

    async def save(self, group: Group) -> None:
        """Insert a new group or overwrite an existing one.

        Args:
            group: The Group aggregate to persist
        """
        model = await self._session.get(GroupModel, group.id.value)
        created = model is None

        if model is None:
            model = GroupModel(id=group.id.value, created_at=group.created_at)
            self._session.add(model)

        model.name = group.name
        model.type = group.type
        model.clearance = group.clearance
        model.admins = [p.value for p in group.admins]
        model.members = [p.value for p in group.members]
        model.children = [c.value for c in group.children]
        model.ancestors = [a.value for a in group.ancestors]
        model.hierarchy = list(group.hierarchy)
        model.updated_at = group.updated_at

        await self._session.flush()
        self._probe.group_saved(group.id.value, created=created)

    async def get_by_id(self, group_id: GroupId, for_update: bool = False) -> Group | None:
        """Retrieve a group by its ID.

        Args:
            group_id: The unique identifier of the group
            for_update: Lock the row until the transaction ends

        Returns:
            The Group aggregate, or None if not found
        """
        stmt = select(GroupModel).where(GroupModel.id == group_id.value)
        result = await self._session.execute(self._locking(stmt, for_update))
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.group_not_found(group_id.value)
            return None

        self._probe.group_retrieved(group_id.value)
        return self._to_domain(model)

    async def get_many(
        self, group_ids: Sequence[GroupId], for_update: bool = False
    ) -> list[Group]:
        """Retrieve every listed group, ordered by id.

        Ordering by id keeps lock acquisition order stable across
        concurrent transactions.
        """
        if not group_ids:
            return []

        stmt = (
            select(GroupModel)
            .where(GroupModel.id.in_([g.value for g in group_ids]))
            .order_by(GroupModel.id)
        )
        result = await self._session.execute(self._locking(stmt, for_update))
        models = result.scalars().all()

        self._probe.groups_loaded(len(group_ids), len(models), locked=for_update)
        return [self._to_domain(m) for m in models]

    async def find_parent(self, child_id: GroupId, for_update: bool = False) -> Group | None:
        """Find the group whose ``children`` array contains ``child_id``."""
        stmt = (
            select(GroupModel)
            .where(GroupModel.children.contains([child_id.value]))
            .order_by(GroupModel.id)
            .limit(1)
        )
        result = await self._session.execute(self._locking(stmt, for_update))
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def find_listing_person(
        self, person_id: PersonId, for_update: bool = False
    ) -> list[Group]:
        """Find every group listing the person in ``members`` or ``admins``."""
        stmt = (
            select(GroupModel)
            .where(
                or_(
                    GroupModel.members.contains([person_id.value]),
                    GroupModel.admins.contains([person_id.value]),
                )
            )
            .order_by(GroupModel.id)
        )
        result = await self._session.execute(self._locking(stmt, for_update))
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_all(self) -> list[Group]:
        """List all groups in creation order."""
        stmt = select(GroupModel).order_by(GroupModel.created_at, GroupModel.id)
        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def delete(self, group_id: GroupId) -> bool:
        """Delete a group record.

        Returns:
            True if deleted, False if not found
        """
        stmt = delete(GroupModel).where(GroupModel.id == group_id.value)
        result = await self._session.execute(stmt)
        deleted = result.rowcount > 0

        if deleted:
            self._probe.group_deleted(group_id.value)
        return deleted

    @staticmethod
    def _locking(stmt: Select, for_update: bool) -> Select:
        if not for_update:
            return stmt
        return stmt.with_for_update().execution_options(populate_existing=True)

    def _to_domain(self, model: GroupModel) -> Group:
        """Convert a GroupModel to a Group domain aggregate."""
        return Group(
            id=GroupId(value=model.id),
            name=model.name,
            type=model.type,
            clearance=model.clearance,
            admins=[PersonId(value=p) for p in model.admins],
            members=[PersonId(value=p) for p in model.members],
            children=[GroupId(value=c) for c in model.children],
            ancestors=[GroupId(value=a) for a in model.ancestors],
            hierarchy=list(model.hierarchy),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
