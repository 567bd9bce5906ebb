"""Read-side queries over a group's subtree."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from org.application.observability import DefaultSubtreeQueryProbe, SubtreeQueryProbe
from org.application.traversal import walk_subtree
from org.application.unit_of_work import transaction
from org.application.validation import resolve_group_id
from org.domain.aggregates import Group, Person
from org.domain.value_objects import GroupId, PersonId
from org.ports.exceptions import NotFoundError
from org.ports.repositories import IGroupRepository, IPersonRepository


class SubtreeQueryService:
    """Application service for subtree traversal queries.

    Reads take no locks. A corrupted tree (a revisit or a dangling child
    entry) never fails a query; the offending edge is skipped and reported
    through the probe.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: IGroupRepository,
        person_repository: IPersonRepository,
        probe: SubtreeQueryProbe | None = None,
    ):
        self._session = session
        self._group_repository = group_repository
        self._person_repository = person_repository
        self._probe = probe or DefaultSubtreeQueryProbe()

    async def get_subtree(self, group_id: str | GroupId) -> list[Group]:
        """Return a group and all of its descendants, root first, breadth-first.

        Raises:
            NotFoundError: If the group does not exist
        """
        async with transaction(self._session):
            return await self._collect(group_id)

    async def get_group_members(self, group_id: str | GroupId) -> list[Person]:
        """Return every person directly assigned anywhere in the subtree.

        Members are resolved in one batched lookup and reported once each,
        in traversal order.

        Raises:
            NotFoundError: If the group does not exist
        """
        async with transaction(self._session):
            groups = await self._collect(group_id)

            member_ids: list[PersonId] = list(
                dict.fromkeys(pid for group in groups for pid in group.members)
            )
            found = {
                p.id: p for p in await self._person_repository.get_many(member_ids)
            }

        members = [found[pid] for pid in member_ids if pid in found]
        self._probe.subtree_traversed(
            group_id=groups[0].id.value,
            group_count=len(groups),
            member_count=len(members),
        )
        return members

    async def _collect(self, group_id: str | GroupId) -> list[Group]:
        resolved = resolve_group_id(group_id)
        root = (
            await self._group_repository.get_by_id(resolved)
            if resolved is not None
            else None
        )
        if root is None:
            raise NotFoundError("Group", str(group_id))

        def revisit(parent: Group, child_id: GroupId) -> None:
            self._probe.revisit_skipped(group_id=parent.id.value, revisited_id=child_id.value)

        def dangling(parent: Group, child_id: GroupId) -> None:
            self._probe.dangling_child(group_id=parent.id.value, child_id=child_id.value)

        groups = [root]
        async for _, child in walk_subtree(
            root, self._group_repository.get_many, revisit, dangling
        ):
            groups.append(child)
        return groups
