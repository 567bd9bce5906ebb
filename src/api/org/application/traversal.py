"""Iterative breadth-first traversal of a group subtree.

The walk loads one tree level per repository call and keeps a visited set.
It never relies on the forest invariant: a ``children`` entry pointing back
into the already visited part of the tree, or to a group that does not
exist, is handed to a callback instead of being followed.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Sequence

from org.domain.aggregates import Group
from org.domain.value_objects import GroupId

LoadMany = Callable[[Sequence[GroupId]], Awaitable[list[Group]]]
EdgeCallback = Callable[[Group, GroupId], None]


async def walk_subtree(
    root: Group,
    load_many: LoadMany,
    on_revisit: EdgeCallback,
    on_dangling: EdgeCallback,
) -> AsyncIterator[tuple[Group, Group]]:
    """Yield ``(parent, child)`` edges below ``root`` in breadth-first order.

    A parent is always yielded (as a child) before its own children, so a
    consumer may rewrite a child from its parent's already rewritten state.

    Args:
        root: Group to start from (not yielded itself)
        load_many: Batched loader for one level of child ids
        on_revisit: Called for an edge to an already visited group
        on_dangling: Called for an edge to a group that does not exist
    """
    visited: set[GroupId] = {root.id}
    frontier = [root]

    while frontier:
        wanted = [
            child_id
            for group in frontier
            for child_id in group.children
            if child_id not in visited
        ]
        loaded: dict[GroupId, Group] = {}
        if wanted:
            loaded = {g.id: g for g in await load_many(list(dict.fromkeys(wanted)))}

        next_frontier: list[Group] = []
        for parent in frontier:
            for child_id in list(parent.children):
                if child_id in visited:
                    on_revisit(parent, child_id)
                    continue
                child = loaded.get(child_id)
                if child is None:
                    on_dangling(parent, child_id)
                    continue
                visited.add(child_id)
                next_frontier.append(child)
                yield parent, child

        frontier = next_frontier
