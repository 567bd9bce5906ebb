"""In-memory stand-ins for the persistence layer used by service tests.

Repositories hand out deep copies, so a service only sees its own changes
after saving them, just like with a real database. ``FakeSession`` takes
a snapshot of the store when a transaction starts and restores it when
the block raises.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime

from org.domain.aggregates import Group, Person
from org.domain.value_objects import GroupId, PersonId
from org.ports.exceptions import ConflictError


@dataclass
class InMemoryStore:
    groups: dict[GroupId, Group] = field(default_factory=dict)
    persons: dict[PersonId, Person] = field(default_factory=dict)
    # (kind, id) per row lock, in acquisition order; not part of snapshots
    locks: list[tuple[str, str]] = field(default_factory=list)

    def snapshot(self) -> tuple[dict[GroupId, Group], dict[PersonId, Person]]:
        return copy.deepcopy(self.groups), copy.deepcopy(self.persons)

    def restore(
        self, snapshot: tuple[dict[GroupId, Group], dict[PersonId, Person]]
    ) -> None:
        self.groups, self.persons = snapshot


class FakeSession:
    """Just enough of ``AsyncSession`` for ``transaction()``."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._depth = 0
        self.commits = 0
        self.rollbacks = 0

    def in_transaction(self) -> bool:
        return self._depth > 0

    def begin(self):
        return self._scope()

    def begin_nested(self):
        return self._scope()

    @asynccontextmanager
    async def _scope(self):
        snapshot = self._store.snapshot()
        self._depth += 1
        try:
            yield self
        except BaseException:
            self._store.restore(snapshot)
            self.rollbacks += 1
            raise
        else:
            self.commits += 1
        finally:
            self._depth -= 1


class InMemoryGroupRepository:
    """IGroupRepository over an ``InMemoryStore``.

    ``failing_saves`` makes ``save`` raise for the listed ids, to check
    that a failed cascade leaves the store untouched.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.failing_saves: set[GroupId] = set()
        self.locked: list[GroupId] = []

    def _out(self, group: Group, for_update: bool) -> Group:
        if for_update:
            self.locked.append(group.id)
            self._store.locks.append(("group", group.id.value))
        return copy.deepcopy(group)

    async def save(self, group: Group) -> None:
        if group.id in self.failing_saves:
            raise RuntimeError(f"injected failure saving {group.id}")
        self._store.groups[group.id] = copy.deepcopy(group)

    async def get_by_id(self, group_id: GroupId, for_update: bool = False) -> Group | None:
        group = self._store.groups.get(group_id)
        return self._out(group, for_update) if group is not None else None

    async def get_many(
        self, group_ids: Sequence[GroupId], for_update: bool = False
    ) -> list[Group]:
        wanted = sorted(set(group_ids), key=lambda gid: gid.value)
        return [
            self._out(self._store.groups[gid], for_update)
            for gid in wanted
            if gid in self._store.groups
        ]

    async def find_parent(self, child_id: GroupId, for_update: bool = False) -> Group | None:
        for group in self._store.groups.values():
            if child_id in group.children:
                return self._out(group, for_update)
        return None

    async def find_listing_person(
        self, person_id: PersonId, for_update: bool = False
    ) -> list[Group]:
        return [
            self._out(group, for_update)
            for group in self._store.groups.values()
            if person_id in group.members or person_id in group.admins
        ]

    async def list_all(self) -> list[Group]:
        groups = sorted(
            self._store.groups.values(), key=lambda g: (g.created_at, g.id.value)
        )
        return [copy.deepcopy(g) for g in groups]

    async def delete(self, group_id: GroupId) -> bool:
        return self._store.groups.pop(group_id, None) is not None


class InMemoryPersonRepository:
    """IPersonRepository over an ``InMemoryStore``."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.locked: list[PersonId] = []

    def _lock(self, persons, for_update: bool) -> None:
        if for_update:
            for person in sorted(persons, key=lambda p: p.id.value):
                self.locked.append(person.id)
                self._store.locks.append(("person", person.id.value))

    def _ordered(self, persons) -> list[Person]:
        return [
            copy.deepcopy(p)
            for p in sorted(persons, key=lambda p: (p.created_at, p.id.value))
        ]

    async def add(self, person: Person) -> None:
        if person.id in self._store.persons:
            raise ConflictError(
                f"Person {person.id.value} already exists", entity_id=person.id.value
            )
        self._store.persons[person.id] = copy.deepcopy(person)

    async def save(self, person: Person) -> None:
        self._store.persons[person.id] = copy.deepcopy(person)

    async def get_by_id(self, person_id: PersonId, for_update: bool = False) -> Person | None:
        person = self._store.persons.get(person_id)
        if person is None:
            return None
        self._lock([person], for_update)
        return copy.deepcopy(person)

    async def get_many(
        self, person_ids: Sequence[PersonId], for_update: bool = False
    ) -> list[Person]:
        wanted = set(person_ids)
        found = [p for p in self._store.persons.values() if p.id in wanted]
        self._lock(found, for_update)
        if for_update:
            return [copy.deepcopy(p) for p in sorted(found, key=lambda p: p.id.value)]
        return self._ordered(found)

    async def list_alive(self) -> list[Person]:
        return self._ordered(p for p in self._store.persons.values() if p.alive)

    async def list_updated_between(self, start: datetime, end: datetime) -> list[Person]:
        return self._ordered(
            p for p in self._store.persons.values() if start < p.updated_at < end
        )

    async def list_by_direct_group(
        self, group_id: GroupId, for_update: bool = False
    ) -> list[Person]:
        found = [p for p in self._store.persons.values() if p.direct_group == group_id]
        self._lock(found, for_update)
        return [copy.deepcopy(p) for p in sorted(found, key=lambda p: p.id.value)]

    async def delete(self, person_id: PersonId) -> int:
        return 1 if self._store.persons.pop(person_id, None) is not None else 0


def assert_forest(store: InMemoryStore) -> None:
    """Every group has at most one parent and chains that match it."""
    parents: dict[GroupId, Group] = {}
    for group in store.groups.values():
        assert len(group.children) == len(set(group.children))
        for child_id in group.children:
            assert child_id not in parents, f"{child_id} has two parents"
            parents[child_id] = group

    for group in store.groups.values():
        parent = parents.get(group.id)
        if parent is None:
            assert group.ancestors == []
            assert group.hierarchy == [group.name]
        else:
            assert group.ancestors == [*parent.ancestors, parent.id]
            assert group.hierarchy == [*parent.hierarchy, group.name]


def assert_membership_consistent(store: InMemoryStore) -> None:
    """Group member lists and person direct groups agree in both directions."""
    for group in store.groups.values():
        assert set(group.admins) <= set(group.members)
        for person_id in group.members:
            assert store.persons[person_id].direct_group == group.id

    for person in store.persons.values():
        listing = [g.id for g in store.groups.values() if person.id in g.members]
        if person.direct_group is None:
            assert listing == []
        else:
            assert listing == [person.direct_group]


def group_locks(store: InMemoryStore) -> list[str]:
    return [row_id for kind, row_id in store.locks if kind == "group"]


def assert_persons_locked_first(store: InMemoryStore) -> None:
    """No person row is locked for the first time after a group row."""
    kinds = [kind for kind, _ in store.locks]
    if "group" not in kinds:
        return
    first_group = kinds.index("group")
    early = {row_id for kind, row_id in store.locks[:first_group]}
    for kind, row_id in store.locks[first_group:]:
        assert kind == "group" or row_id in early, f"person {row_id} locked after a group"
