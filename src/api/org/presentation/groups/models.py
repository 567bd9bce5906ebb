"""Pydantic models for group API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from org.domain.aggregates import Group


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateGroupRequest(_CamelModel):
    """Request model for creating a group.

    Only the shape is checked here; naming and clearance rules are enforced
    by the service so every caller gets the same errors.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Group name")
    type: str | None = Field(default=None, description="Classification tag")
    clearance: int = Field(default=0, description="Clearance level")


class UpdateGroupRequest(_CamelModel):
    """Request model for a partial group update."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, description="New group name")
    type: str | None = Field(default=None, description="New classification tag")
    clearance: int | None = Field(default=None, description="New clearance level")


class AdoptChildrenRequest(_CamelModel):
    """Request model for attaching existing groups as children."""

    model_config = ConfigDict(extra="forbid")

    child_ids: list[str] = Field(
        ..., min_length=1, description="Ids of the groups to adopt, in order"
    )


class GroupResponse(_CamelModel):
    """Response model for group."""

    id: str = Field(..., description="Group ID (ULID format)")
    name: str = Field(..., description="Group name")
    type: str | None = Field(default=None, description="Classification tag")
    clearance: int = Field(..., description="Clearance level")
    admins: list[str] = Field(default_factory=list, description="Admin person ids")
    members: list[str] = Field(default_factory=list, description="Direct member ids")
    children: list[str] = Field(default_factory=list, description="Child group ids")
    ancestors: list[str] = Field(
        default_factory=list, description="Ancestor ids, root first"
    )
    hierarchy: list[str] = Field(
        default_factory=list, description="Names from the root down to this group"
    )
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, group: Group) -> GroupResponse:
        """Convert domain Group aggregate to API response.

        Args:
            group: Group domain aggregate

        Returns:
            GroupResponse with all id collections flattened to strings
        """
        return cls(
            id=group.id.value,
            name=group.name,
            type=group.type,
            clearance=group.clearance,
            admins=[p.value for p in group.admins],
            members=[p.value for p in group.members],
            children=[c.value for c in group.children],
            ancestors=[a.value for a in group.ancestors],
            hierarchy=list(group.hierarchy),
            created_at=group.created_at,
            updated_at=group.updated_at,
        )


class RemovalResponse(BaseModel):
    """Outcome of a delete request."""

    matched: int
    deleted: int
