"""Unit tests for the Person aggregate."""

import pytest

from org.domain.aggregates import Person
from org.domain.value_objects import DEFAULT_RANK, GroupId, PersonId


@pytest.fixture
def person() -> Person:
    return Person.create(PersonId("1234567"), "Patches", "Unbreakable")


class TestPersonFactory:
    def test_creates_unassigned_alive_person(self, person):
        assert person.id == PersonId("1234567")
        assert person.full_name == "Patches Unbreakable"
        assert person.rank == DEFAULT_RANK
        assert person.clearance == 0
        assert person.is_security_officer is False
        assert person.direct_group is None
        assert person.alive is True
        assert person.created_at == person.updated_at

    def test_accepts_profile_attributes(self):
        person = Person.create(
            PersonId("7654321"),
            "Siegward",
            "Catarina",
            rank="Knight",
            clearance=4,
            is_security_officer=True,
        )

        assert person.rank == "Knight"
        assert person.clearance == 4
        assert person.is_security_officer is True

    def test_none_profile_values_keep_defaults(self):
        person = Person.create(PersonId("7654321"), "Siegward", "Catarina", rank=None)

        assert person.rank == DEFAULT_RANK

    def test_rejects_unknown_attribute(self):
        with pytest.raises(ValueError):
            Person.create(PersonId("7654321"), "Siegward", "Catarina", alive=False)

    @pytest.mark.parametrize("first, last", [("", "Catarina"), ("Siegward", "  ")])
    def test_rejects_blank_names(self, first, last):
        with pytest.raises(ValueError):
            Person.create(PersonId("7654321"), first, last)


class TestApplyChanges:
    def test_patches_provided_fields_only(self, person):
        person.apply_changes({"job": "Smith", "mail": None})

        assert person.job == "Smith"
        assert person.mail is None
        assert person.first_name == "Patches"

    def test_refreshes_updated_at(self, person):
        before = person.updated_at

        person.apply_changes({"job": "Smith"})

        assert person.updated_at >= before

    @pytest.mark.parametrize("field", ["id", "alive", "direct_group", "created_at"])
    def test_rejects_non_patchable_fields(self, person, field):
        with pytest.raises(ValueError):
            person.apply_changes({field: "x"})

    def test_rejects_blank_name(self, person):
        with pytest.raises(ValueError):
            person.apply_changes({"last_name": " "})

        assert person.last_name == "Unbreakable"

    def test_rejects_negative_clearance(self, person):
        with pytest.raises(ValueError):
            person.apply_changes({"clearance": -3})


class TestAssignment:
    def test_assign_and_leave(self, person):
        group_id = GroupId.generate()

        person.assign_to(group_id)
        assert person.direct_group == group_id

        person.leave_group()
        assert person.direct_group is None

    def test_discharge_clears_group(self, person):
        person.assign_to(GroupId.generate())

        person.discharge()

        assert person.alive is False
        assert person.direct_group is None

    def test_discharged_person_cannot_be_assigned(self, person):
        person.discharge()

        with pytest.raises(ValueError):
            person.assign_to(GroupId.generate())
