"""Group application service for the organization bounded context.

Owns the shape of the tree: group creation, adoption of children under a
new parent and every rewrite of the denormalized ``ancestors``/``hierarchy``
chains that such a move implies.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from org.application.observability import DefaultGroupServiceProbe, GroupServiceProbe
from org.application.traversal import walk_subtree
from org.application.unit_of_work import GroupWorkset, transaction
from org.application.validation import (
    parse_group_patch,
    parse_new_group,
    resolve_group_id,
)
from org.domain.aggregates import Group
from org.domain.value_objects import GroupId, RemovalResult
from org.ports.exceptions import CycleError, NotFoundError, OrgError
from org.ports.repositories import IGroupRepository, IPersonRepository


class GroupService:
    """Application service for the group hierarchy.

    Every public mutation runs in a single transaction. Rows taking part in
    a hierarchy change are loaded with ``FOR UPDATE`` through a
    ``GroupWorkset``, so concurrent operations on overlapping subtrees
    serialize while disjoint subtrees proceed independently.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: IGroupRepository,
        person_repository: IPersonRepository,
        probe: GroupServiceProbe | None = None,
    ):
        """Initialize GroupService with dependencies.

        Args:
            session: Database session for transaction management
            group_repository: Repository for group persistence
            person_repository: Repository for person persistence (used to
                release members when a group is removed)
            probe: Optional domain probe for observability
        """
        self._session = session
        self._group_repository = group_repository
        self._person_repository = person_repository
        self._probe = probe or DefaultGroupServiceProbe()

    async def create_group(
        self,
        name: str,
        group_type: str | None = None,
        clearance: int = 0,
    ) -> Group:
        """Create a new root group.

        Args:
            name: Group name (trimmed, 1-255 characters)
            group_type: Free-form classification tag
            clearance: Non-negative clearance level

        Returns:
            The created Group aggregate

        Raises:
            ValidationError: If name or clearance is invalid
        """
        try:
            new_group = parse_new_group(name, group_type, clearance)
            group = Group.create(
                name=new_group.name,
                group_type=new_group.type,
                clearance=new_group.clearance,
            )

            async with transaction(self._session):
                await self._group_repository.save(group)

            self._probe.group_created(group_id=group.id.value, name=group.name)
            return group

        except OrgError as e:
            self._probe.group_creation_failed(name=name, error=str(e))
            raise

    async def get_group(self, group_id: str | GroupId) -> Group | None:
        """Get a group by ID.

        Returns:
            The Group aggregate, or None if not found or the id is malformed
        """
        resolved = resolve_group_id(group_id)
        if resolved is None:
            return None
        async with transaction(self._session):
            return await self._group_repository.get_by_id(resolved)

    async def list_groups(self) -> list[Group]:
        """List all groups in creation order."""
        async with transaction(self._session):
            return await self._group_repository.list_all()

    async def children_adoption(
        self, parent_id: str | GroupId, child_ids: Sequence[str | GroupId]
    ) -> None:
        """Attach groups as children of a parent, moving whole subtrees.

        Every id is resolved and every cycle check done before any group is
        modified. Each child is detached from its current parent, appended
        to the new parent, and then its subtree chains are re-derived level
        by level. All touched groups are written once at the end.

        Args:
            parent_id: The adopting group
            child_ids: Groups to adopt, in order (duplicates collapsed)

        Raises:
            NotFoundError: If the parent or any child does not exist
            CycleError: If a child is the parent itself or one of its
                ancestors, or the subtree walk runs into the parent
        """
        parent_label = str(parent_id)
        child_labels = list(dict.fromkeys(str(c) for c in child_ids))

        try:
            async with transaction(self._session):
                work = GroupWorkset(self._group_repository)
                await self._lock_adoption(work, parent_id, child_labels)

                parent = await self._require(work, parent_id)
                children = [await self._require(work, c) for c in child_labels]

                for child in children:
                    if child.id == parent.id or parent.has_ancestor(child.id):
                        raise CycleError(parent.id.value, child.id.value)

                rewritten = 0
                for child in children:
                    current = await work.find_parent(child.id)
                    if current is not None and current.id != parent.id:
                        current.remove_child(child.id)
                        work.mark(current)

                    parent.add_child(child.id)
                    child.place_under(parent)
                    work.mark(parent, child)

                    rewritten += 1 + await self._rewrite_subtree(
                        work, child, forbidden=parent.id
                    )

                await work.flush()

            self._probe.children_adopted(
                parent_id=parent.id.value,
                child_ids=[c.id.value for c in children],
                rewritten_count=rewritten,
            )

        except OrgError as e:
            self._probe.adoption_failed(
                parent_id=parent_label, child_ids=child_labels, error=str(e)
            )
            raise

    async def update_group(
        self,
        group_id: str | GroupId,
        name: str | None = None,
        group_type: str | None = None,
        clearance: int | None = None,
    ) -> Group:
        """Partially update a group.

        A rename also rewrites the ``hierarchy`` of every descendant.

        Raises:
            NotFoundError: If the group does not exist
            ValidationError: If a provided value is invalid
        """
        try:
            patch = parse_group_patch(name, group_type, clearance)

            async with transaction(self._session):
                work = GroupWorkset(self._group_repository)
                group = await self._require(work, group_id)

                renamed = patch.name is not None and patch.name != group.name
                if patch.name is not None:
                    group.rename(patch.name)
                if patch.type is not None:
                    group.reclassify(patch.type)
                if patch.clearance is not None:
                    group.change_clearance(patch.clearance)
                work.mark(group)

                rewritten = 0
                if renamed:
                    rewritten = await self._rewrite_subtree(work, group)

                await work.flush()

            self._probe.group_updated(group_id=group.id.value, rewritten_count=rewritten)
            return group

        except OrgError as e:
            self._probe.group_update_failed(group_id=str(group_id), error=str(e))
            raise

    async def remove_group(self, group_id: str | GroupId) -> RemovalResult:
        """Delete a group and repair everything that pointed at it.

        The group is detached from its parent, each of its children becomes
        a root (with its subtree rewritten), and its members lose their
        direct group. Removing an absent group reports zero counts.
        """
        resolved = resolve_group_id(group_id)
        if resolved is None:
            return RemovalResult(matched=0, deleted=0)

        try:
            async with transaction(self._session):
                peek = await self._group_repository.get_by_id(resolved)
                if peek is None:
                    return RemovalResult(matched=0, deleted=0)

                # Persons before groups, matching the assignment operations
                listed = await self._person_repository.list_by_direct_group(peek.id)
                await self._person_repository.get_many(
                    [*peek.members, *peek.admins, *(p.id for p in listed)], for_update=True
                )

                work = GroupWorkset(self._group_repository)
                stored_parent = await self._group_repository.find_parent(peek.id)
                await work.get_many(
                    [peek.id, *peek.children]
                    + ([stored_parent.id] if stored_parent is not None else [])
                )
                group = await work.get(resolved)
                if group is None:
                    return RemovalResult(matched=0, deleted=0)

                parent = await work.find_parent(group.id)
                if parent is not None:
                    parent.remove_child(group.id)
                    work.mark(parent)

                members = await self._person_repository.list_by_direct_group(
                    group.id, for_update=True
                )
                for person in members:
                    person.leave_group()
                    await self._person_repository.save(person)

                orphans = await work.get_many(group.children)
                for child in orphans:
                    child.place_under(None)
                    work.mark(child)
                    await self._rewrite_subtree(work, child, forbidden=group.id)

                work.forget(group.id)
                await work.flush()
                deleted = await self._group_repository.delete(group.id)

            self._probe.group_removed(
                group_id=group.id.value,
                released_members=len(members),
                orphaned_children=len(orphans),
            )
            return RemovalResult(matched=1, deleted=1 if deleted else 0)

        except OrgError as e:
            self._probe.group_removal_failed(group_id=str(group_id), error=str(e))
            raise

    async def _lock_adoption(
        self, work: GroupWorkset, parent_id: str | GroupId, child_ids: Sequence[str]
    ) -> None:
        """Lock the parent, the children and their current parents in one batch.

        The batch is locked in id order, so two adoptions sharing groups
        acquire their locks in the same order. Ids that do not resolve are
        left for ``_require`` to report.
        """
        parent = resolve_group_id(parent_id)
        children = [gid for gid in map(resolve_group_id, child_ids) if gid is not None]

        wanted = [parent] if parent is not None else []
        for child_id in children:
            wanted.append(child_id)
            stored_parent = await self._group_repository.find_parent(child_id)
            if stored_parent is not None:
                wanted.append(stored_parent.id)
        await work.get_many(wanted)

    async def _require(self, work: GroupWorkset, group_id: str | GroupId) -> Group:
        resolved = resolve_group_id(group_id)
        group = await work.get(resolved) if resolved is not None else None
        if group is None:
            raise NotFoundError("Group", str(group_id))
        return group

    async def _rewrite_subtree(
        self,
        work: GroupWorkset,
        root: Group,
        forbidden: GroupId | None = None,
    ) -> int:
        """Re-derive ancestors and hierarchy for every descendant of ``root``.

        ``root`` itself must already be correct. Dangling child entries are
        pruned; reaching ``forbidden`` or an already visited group means the
        stored tree would no longer be a forest.

        Returns:
            Number of descendants visited
        """

        def revisit(parent: Group, child_id: GroupId) -> None:
            raise CycleError(parent.id.value, child_id.value)

        def dangling(parent: Group, child_id: GroupId) -> None:
            parent.remove_child(child_id)
            work.mark(parent)

        count = 0
        async for parent, child in walk_subtree(root, work.get_many, revisit, dangling):
            if child.id == forbidden:
                raise CycleError(forbidden.value, root.id.value)
            child.place_under(parent)
            work.mark(child)
            count += 1
        return count
