"""Validation layer for the organization context.

Field-level checks run through pydantic models before any aggregate is
touched. Pydantic failures are translated into the context's own
``ValidationError`` so callers only ever see the org error taxonomy, with
the offending field name attached.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Annotated, Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from org.domain.value_objects import GroupId, PersonId
from org.ports.exceptions import ValidationError

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Text = Annotated[str, StringConstraints(max_length=255)]
ShortText = Annotated[str, StringConstraints(max_length=64)]
Address = Annotated[str, StringConstraints(max_length=512)]
Clearance = Annotated[int, Field(ge=0)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid")


class NewPerson(_Payload):
    """Fields accepted when creating a person."""

    id: str
    first_name: Name
    last_name: Name
    job: Text | None = None
    mail: Text | None = None
    phone: ShortText | None = None
    rank: ShortText | None = None
    address: Address | None = None
    is_security_officer: bool | None = None
    clearance: Clearance | None = None

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: str) -> str:
        return PersonId.from_string(value).value

    def profile(self) -> dict[str, Any]:
        """Optional attributes that were actually supplied."""
        return self.model_dump(
            exclude={"id", "first_name", "last_name"}, exclude_none=True
        )


class PersonPatch(NewPerson):
    """Fields accepted when updating a person; only ``id`` is required."""

    first_name: Name | None = None
    last_name: Name | None = None

    def changes(self) -> dict[str, Any]:
        """Provided attributes, excluding the id used to address the record."""
        return self.model_dump(exclude={"id"}, exclude_none=True)


class NewGroup(_Payload):
    """Fields accepted when creating a group."""

    name: Name
    type: Text | None = None
    clearance: Clearance = 0


class GroupPatch(_Payload):
    """Fields accepted when updating a group."""

    name: Name | None = None
    type: Text | None = None
    clearance: Clearance | None = None


def _translate(exc: pydantic.ValidationError) -> ValidationError:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"]) or None
    message = error["msg"]
    if field is not None:
        message = f"{field}: {message}"
    return ValidationError(message, field=field)


def _parse(model: type[BaseModel], fields: Mapping[str, Any] | None) -> Any:
    if fields is None:
        raise ValidationError("Payload is required")
    try:
        return model.model_validate(dict(fields))
    except pydantic.ValidationError as e:
        raise _translate(e) from e


def parse_new_person(fields: Mapping[str, Any] | None) -> NewPerson:
    """Validate a person creation payload.

    Raises:
        ValidationError: On a malformed id, blank names, negative clearance
            or unknown attributes
    """
    return _parse(NewPerson, fields)


def parse_person_patch(fields: Mapping[str, Any] | None) -> PersonPatch:
    """Validate a partial person update payload."""
    return _parse(PersonPatch, fields)


def parse_new_group(
    name: str | None, group_type: str | None = None, clearance: int | None = 0
) -> NewGroup:
    return _parse(
        NewGroup,
        {"name": name, "type": group_type, "clearance": 0 if clearance is None else clearance},
    )


def parse_group_patch(
    name: str | None = None, group_type: str | None = None, clearance: int | None = None
) -> GroupPatch:
    return _parse(GroupPatch, {"name": name, "type": group_type, "clearance": clearance})


def parse_person_id(value: Any, field: str = "id") -> PersonId:
    """Parse a person id that must be well formed.

    Raises:
        ValidationError: If the value is not exactly seven digits
    """
    try:
        return PersonId.from_string(value)
    except ValueError as e:
        raise ValidationError(str(e), field=field) from e


def resolve_person_id(value: Any) -> PersonId | None:
    """Parse a person id used as a lookup key.

    A malformed id cannot address any record, so it resolves to ``None``
    instead of failing validation.
    """
    try:
        return PersonId.from_string(value)
    except ValueError:
        return None


def resolve_group_id(value: Any) -> GroupId | None:
    """Parse a group id used as a lookup key (``None`` when malformed)."""
    if isinstance(value, GroupId):
        return value
    try:
        return GroupId.from_string(value)
    except ValueError:
        return None


def as_utc(moment: datetime) -> datetime:
    """Read naive datetimes as UTC so they compare with stored timestamps."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def validate_time_range(start: datetime, end: datetime) -> None:
    """Ensure an update window is ordered.

    Raises:
        ValidationError: If ``start`` is after ``end``
    """
    if as_utc(start) > as_utc(end):
        raise ValidationError(
            f"Range start {start.isoformat()} is after end {end.isoformat()}",
            field="from",
        )
