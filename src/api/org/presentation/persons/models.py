"""Pydantic models for person API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from org.domain.aggregates import Person


class _ProfileFields(BaseModel):
    """Optional profile attributes shared by create and update bodies."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    job: str | None = None
    mail: str | None = None
    phone: str | None = None
    rank: str | None = None
    address: str | None = None
    is_security_officer: bool | None = None
    clearance: int | None = None

    def to_fields(self) -> dict[str, Any]:
        """Only the attributes the caller actually sent, snake_case."""
        return self.model_dump(exclude_unset=True)


class CreateUserRequest(_ProfileFields):
    """Request model for creating a person."""

    id: str = Field(..., description="Seven digit personal number")
    first_name: str
    last_name: str


class UpdateUserRequest(_ProfileFields):
    """Request model for patching a person.

    The id comes from the path; ``directGroup`` and ``alive`` are rejected
    as unknown fields since they have their own endpoints.
    """

    first_name: str | None = None
    last_name: str | None = None


class PersonResponse(BaseModel):
    """Response model for person."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Seven digit personal number")
    first_name: str
    last_name: str
    full_name: str
    job: str | None = None
    mail: str | None = None
    phone: str | None = None
    rank: str
    address: str | None = None
    is_security_officer: bool
    clearance: int
    direct_group: str | None = Field(
        default=None, description="Id of the group the person is assigned to"
    )
    alive: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, person: Person) -> PersonResponse:
        """Convert domain Person aggregate to API response."""
        return cls(
            id=person.id.value,
            first_name=person.first_name,
            last_name=person.last_name,
            full_name=person.full_name,
            job=person.job,
            mail=person.mail,
            phone=person.phone,
            rank=person.rank,
            address=person.address,
            is_security_officer=person.is_security_officer,
            clearance=person.clearance,
            direct_group=person.direct_group.value if person.direct_group else None,
            alive=person.alive,
            created_at=person.created_at,
            updated_at=person.updated_at,
        )


class DischargeResponse(BaseModel):
    """Outcome of a discharge request."""

    matched: int
