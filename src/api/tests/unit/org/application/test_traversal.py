"""Unit tests for the breadth-first subtree walk."""

import pytest

from org.application.traversal import walk_subtree
from org.domain.aggregates import Group
from org.domain.value_objects import GroupId


def chain(length: int) -> list[Group]:
    groups = [Group.create(name=f"g{i}") for i in range(length)]
    for parent, child in zip(groups, groups[1:]):
        parent.add_child(child.id)
    return groups


def loader(groups: list[Group], calls: list | None = None):
    by_id = {g.id: g for g in groups}

    async def load_many(ids):
        if calls is not None:
            calls.append(list(ids))
        return [by_id[i] for i in ids if i in by_id]

    return load_many


def ignore(parent, child_id):
    pass


class TestWalkSubtree:
    @pytest.mark.asyncio
    async def test_yields_edges_breadth_first(self):
        root, a, b, a1 = (Group.create(name=n) for n in ("root", "a", "b", "a1"))
        root.add_child(a.id)
        root.add_child(b.id)
        a.add_child(a1.id)

        edges = [
            (p.name, c.name)
            async for p, c in walk_subtree(root, loader([a, b, a1]), ignore, ignore)
        ]

        assert edges == [("root", "a"), ("root", "b"), ("a", "a1")]

    @pytest.mark.asyncio
    async def test_loads_one_level_per_call(self):
        groups = chain(4)
        calls: list = []

        async for _ in walk_subtree(groups[0], loader(groups, calls), ignore, ignore):
            pass

        assert calls == [[groups[1].id], [groups[2].id], [groups[3].id]]

    @pytest.mark.asyncio
    async def test_handles_deep_chains_iteratively(self):
        groups = chain(3000)

        count = 0
        async for _ in walk_subtree(groups[0], loader(groups), ignore, ignore):
            count += 1

        assert count == 2999

    @pytest.mark.asyncio
    async def test_reports_revisits_instead_of_looping(self):
        groups = chain(3)
        groups[2].children.append(groups[0].id)
        revisits = []

        edges = [
            c
            async for _, c in walk_subtree(
                groups[0],
                loader(groups),
                lambda p, c: revisits.append((p.id, c)),
                ignore,
            )
        ]

        assert len(edges) == 2
        assert revisits == [(groups[2].id, groups[0].id)]

    @pytest.mark.asyncio
    async def test_reports_dangling_children(self):
        root = Group.create(name="root")
        ghost = GroupId.generate()
        root.children.append(ghost)
        dangling = []

        edges = [
            c
            async for _, c in walk_subtree(
                root, loader([]), ignore, lambda p, c: dangling.append(c)
            )
        ]

        assert edges == []
        assert dangling == [ghost]
