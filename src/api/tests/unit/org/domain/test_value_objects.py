"""Unit tests for organization value objects."""

import pytest

from org.domain.value_objects import GroupId, PersonId


class TestGroupId:
    def test_generate_returns_unique_ulids(self):
        first = GroupId.generate()
        second = GroupId.generate()

        assert first != second
        assert len(first.value) == 26

    def test_from_string_round_trips_generated_id(self):
        group_id = GroupId.generate()

        assert GroupId.from_string(group_id.value) == group_id

    @pytest.mark.parametrize("value", ["", "not-a-ulid", "123", None])
    def test_from_string_rejects_malformed_values(self, value):
        with pytest.raises(ValueError):
            GroupId.from_string(value)

    def test_from_string_normalizes_lowercase_to_canonical_form(self):
        group_id = GroupId.generate()

        assert GroupId.from_string(group_id.value.lower()) == group_id

    def test_str_is_raw_value(self):
        group_id = GroupId.generate()
        assert str(group_id) == group_id.value


class TestPersonId:
    """Person ids are exactly seven decimal digits."""

    def test_accepts_seven_digits(self):
        assert PersonId.from_string("1234567").value == "1234567"

    def test_accepts_leading_zeros(self):
        assert PersonId.from_string("0000001").value == "0000001"

    @pytest.mark.parametrize(
        "value",
        ["123456t", "123456", "12345678", " 1234567", "1234567\n", "", None, 1234567],
    )
    def test_rejects_anything_else(self, value):
        with pytest.raises(ValueError):
            PersonId.from_string(value)

    def test_is_hashable_and_comparable(self):
        assert {PersonId("1234567"), PersonId("1234567")} == {PersonId("1234567")}
