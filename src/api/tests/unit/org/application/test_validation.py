"""Unit tests for the validation layer."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from org.application.validation import (
    as_utc,
    parse_group_patch,
    parse_new_group,
    parse_new_person,
    parse_person_id,
    parse_person_patch,
    resolve_group_id,
    resolve_person_id,
    validate_time_range,
)
from org.domain.value_objects import GroupId, PersonId
from org.ports.exceptions import ValidationError


class TestPersonPayloads:
    def test_new_person_trims_names(self):
        payload = parse_new_person(
            {"id": "1234567", "first_name": " Anri ", "last_name": "Astora"}
        )

        assert payload.first_name == "Anri"
        assert payload.profile() == {}

    def test_new_person_profile_holds_supplied_optionals(self):
        payload = parse_new_person(
            {
                "id": "1234567",
                "first_name": "Anri",
                "last_name": "Astora",
                "rank": "Captain",
                "mail": None,
            }
        )

        assert payload.profile() == {"rank": "Captain"}

    @pytest.mark.parametrize("person_id", ["123456t", "", "12345678", "abcdefg"])
    def test_new_person_rejects_bad_ids(self, person_id):
        with pytest.raises(ValidationError) as exc_info:
            parse_new_person({"id": person_id, "first_name": "A", "last_name": "B"})

        assert exc_info.value.field == "id"

    def test_new_person_rejects_unknown_attribute(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_new_person(
                {"id": "1234567", "first_name": "A", "last_name": "B", "nickname": "x"}
            )

        assert exc_info.value.field == "nickname"

    def test_patch_requires_only_id(self):
        patch = parse_person_patch({"id": "1234567", "job": "Sorcerer"})

        assert patch.changes() == {"job": "Sorcerer"}

    def test_patch_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            parse_person_patch({"id": "1234567", "first_name": "  "})

    @pytest.mark.parametrize(
        ("field", "limit"),
        [("job", 255), ("mail", 255), ("phone", 64), ("rank", 64), ("address", 512)],
    )
    def test_new_person_enforces_column_widths(self, field, limit):
        base = {"id": "1234567", "first_name": "A", "last_name": "B"}

        accepted = parse_new_person({**base, field: "x" * limit})
        assert accepted.profile() == {field: "x" * limit}

        with pytest.raises(ValidationError) as exc_info:
            parse_new_person({**base, field: "x" * (limit + 1)})

        assert exc_info.value.field == field

    def test_patch_rejects_overlong_rank(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_person_patch({"id": "1234567", "rank": "r" * 100})

        assert exc_info.value.field == "rank"

    def test_validation_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_new_person({})


class TestGroupPayloads:
    def test_new_group_defaults(self):
        new_group = parse_new_group("  Seldag ")

        assert new_group.name == "Seldag"
        assert new_group.type is None
        assert new_group.clearance == 0

    def test_new_group_treats_missing_clearance_as_zero(self):
        assert parse_new_group("Seldag", clearance=None).clearance == 0

    def test_new_group_rejects_long_name(self):
        with pytest.raises(ValidationError):
            parse_new_group("x" * 256)

    def test_new_group_rejects_overlong_type(self):
        assert parse_new_group("ok", "t" * 255).type == "t" * 255

        with pytest.raises(ValidationError) as exc_info:
            parse_new_group("ok", "t" * 300)

        assert exc_info.value.field == "type"

    def test_patch_rejects_overlong_type(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_group_patch(group_type="t" * 256)

        assert exc_info.value.field == "type"

    def test_patch_leaves_unspecified_fields_unset(self):
        patch = parse_group_patch(clearance=3)

        assert patch.name is None
        assert patch.type is None
        assert patch.clearance == 3

    def test_patch_rejects_negative_clearance(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_group_patch(clearance=-2)

        assert exc_info.value.field == "clearance"


class TestIdentifiers:
    def test_parse_person_id_reports_field(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_person_id("12", field="person_id")

        assert exc_info.value.field == "person_id"

    def test_resolve_person_id(self):
        assert resolve_person_id("1234567") == PersonId("1234567")
        assert resolve_person_id("123456t") is None
        assert resolve_person_id(None) is None

    def test_resolve_group_id(self):
        group_id = GroupId.generate()

        assert resolve_group_id(group_id) is group_id
        assert resolve_group_id(group_id.value) == group_id
        assert resolve_group_id("nope") is None


class TestTimeRange:
    def test_naive_datetimes_are_read_as_utc(self):
        assert as_utc(datetime(2024, 1, 1)) == datetime(2024, 1, 1, tzinfo=UTC)

    def test_aware_datetimes_are_kept(self):
        moment = datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=2)))
        assert as_utc(moment) is moment

    def test_equal_bounds_are_accepted(self):
        now = datetime.now(UTC)
        validate_time_range(now, now)

    def test_reversed_bounds_are_rejected(self):
        now = datetime.now(UTC)

        with pytest.raises(ValidationError) as exc_info:
            validate_time_range(now, now - timedelta(seconds=1))

        assert exc_info.value.field == "from"

    def test_mixed_naive_and_aware_bounds_compare(self):
        validate_time_range(datetime(2024, 1, 1), datetime(2024, 1, 2, tzinfo=UTC))
