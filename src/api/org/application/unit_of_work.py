"""Transaction boundary and per-operation group identity map.

Every service operation runs inside ``transaction(session)``. A session
that is not in a transaction yet gets a top-level ``begin()`` (committed
on success, rolled back on error); a session the caller already opened a
transaction on gets a SAVEPOINT, so the operation still rolls back as a
unit while the outer commit stays with the caller.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from org.domain.aggregates import Group
from org.domain.value_objects import GroupId
from org.ports.repositories import IGroupRepository


def transaction(session: AsyncSession) -> Any:
    """Open the transactional scope for one service operation."""
    if session.in_transaction():
        return session.begin_nested()
    return session.begin()


class GroupWorkset:
    """Identity map of the groups touched by one hierarchy operation.

    A multi-step operation may reach the same group several times (as a
    parent, as a subtree member, as a former parent). Loading through the
    workset guarantees a single in-memory instance per id, with a row lock
    taken on first load, and ``flush`` persists each modified group exactly
    once at the end.
    """

    def __init__(self, repository: IGroupRepository) -> None:
        self._repository = repository
        self._loaded: dict[GroupId, Group] = {}
        self._dirty: dict[GroupId, Group] = {}

    def __contains__(self, group_id: GroupId) -> bool:
        return group_id in self._loaded

    async def get(self, group_id: GroupId) -> Group | None:
        if group_id in self._loaded:
            return self._loaded[group_id]
        group = await self._repository.get_by_id(group_id, for_update=True)
        if group is not None:
            self._loaded[group.id] = group
        return group

    async def get_many(self, group_ids: Sequence[GroupId]) -> list[Group]:
        """Load groups in the requested order, skipping ids that do not resolve."""
        missing = [gid for gid in dict.fromkeys(group_ids) if gid not in self._loaded]
        if missing:
            for group in await self._repository.get_many(missing, for_update=True):
                self._loaded[group.id] = group
        return [self._loaded[gid] for gid in group_ids if gid in self._loaded]

    async def find_parent(self, child_id: GroupId) -> Group | None:
        """Find the current parent, preferring in-memory state over the store.

        Groups already in the workset may hold unsaved changes, so they are
        consulted first; a stored parent that is loaded here but no longer
        lists the child means the child was detached earlier in this operation.
        """
        for group in self._loaded.values():
            if child_id in group.children:
                return group
        stored = await self._repository.find_parent(child_id, for_update=True)
        if stored is None or stored.id in self._loaded:
            return None
        self._loaded[stored.id] = stored
        return stored

    def mark(self, *groups: Group) -> None:
        """Register modified groups for the final flush."""
        for group in groups:
            self._loaded.setdefault(group.id, group)
            self._dirty[group.id] = group

    def forget(self, group_id: GroupId) -> None:
        """Drop a group that is about to be deleted."""
        self._loaded.pop(group_id, None)
        self._dirty.pop(group_id, None)

    @property
    def dirty(self) -> Iterable[Group]:
        return self._dirty.values()

    async def flush(self) -> int:
        """Persist every modified group once.

        Returns:
            Number of groups written
        """
        for group in self._dirty.values():
            await self._repository.save(group)
        count = len(self._dirty)
        self._dirty.clear()
        return count
