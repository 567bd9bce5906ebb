"""HTTP routes for the group hierarchy."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from org.application.services import GroupService, SubtreeQueryService
from org.dependencies.group import get_group_service, get_subtree_query_service
from org.ports.exceptions import NotFoundError, OrgError
from org.presentation.errors import to_http_exception
from org.presentation.groups.models import (
    AdoptChildrenRequest,
    CreateGroupRequest,
    GroupResponse,
    RemovalResponse,
    UpdateGroupRequest,
)
from org.presentation.persons.models import PersonResponse

router = APIRouter(
    prefix="/groups",
    tags=["groups"],
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Group created as a new root"},
        400: {"description": "Invalid name or clearance"},
        500: {"description": "Internal server error"},
    },
)
async def create_group(
    request: CreateGroupRequest,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> GroupResponse:
    """Create a new root group.

    Raises:
        HTTPException: 400 if the name is blank or clearance negative
        HTTPException: 500 for unexpected errors
    """
    try:
        group = await service.create_group(
            name=request.name,
            group_type=request.type,
            clearance=request.clearance,
        )
        return GroupResponse.from_domain(group)

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create group",
        )


@router.get(
    "",
    response_model=list[GroupResponse],
    summary="List groups",
    description="List all groups in creation order",
)
async def list_groups(
    service: Annotated[GroupService, Depends(get_group_service)],
) -> list[GroupResponse]:
    try:
        groups = await service.list_groups()
        return [GroupResponse.from_domain(group) for group in groups]

    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list groups",
        )


@router.get("/{group_id}")
async def get_group(
    group_id: str,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> GroupResponse:
    """Get group by ID.

    A malformed id is reported the same way as an unknown one.

    Raises:
        HTTPException: 404 if group not found
        HTTPException: 500 for unexpected errors
    """
    try:
        group = await service.get_group(group_id)
        if group is None:
            raise to_http_exception(NotFoundError("Group", group_id))
        return GroupResponse.from_domain(group)

    except HTTPException:
        raise
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve group",
        )


@router.patch(
    "/{group_id}",
    response_model=GroupResponse,
    summary="Update group",
    description="Rename, reclassify or change the clearance of a group. "
    "A rename is propagated to the hierarchy of every descendant.",
    responses={
        200: {"description": "Group updated successfully"},
        400: {"description": "Invalid name or clearance"},
        404: {"description": "Group not found"},
        500: {"description": "Internal server error"},
    },
)
async def update_group(
    group_id: str,
    request: UpdateGroupRequest,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> GroupResponse:
    """Partially update a group."""
    try:
        group = await service.update_group(
            group_id,
            name=request.name,
            group_type=request.type,
            clearance=request.clearance,
        )
        return GroupResponse.from_domain(group)

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update group",
        )


@router.delete("/{group_id}")
async def remove_group(
    group_id: str,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> RemovalResponse:
    """Delete a group; its children become roots and its members unassigned.

    Deleting an unknown group succeeds with zero counts.
    """
    try:
        result = await service.remove_group(group_id)
        return RemovalResponse(matched=result.matched, deleted=result.deleted)

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove group",
        )


@router.post(
    "/{group_id}/children",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Adopt child groups",
    description="Move existing groups (with their whole subtrees) under this group.",
    responses={
        204: {"description": "Children adopted"},
        404: {"description": "Parent or a child not found"},
        409: {"description": "Adoption would create a cycle"},
        500: {"description": "Internal server error"},
    },
)
async def adopt_children(
    group_id: str,
    request: AdoptChildrenRequest,
    service: Annotated[GroupService, Depends(get_group_service)],
) -> None:
    try:
        await service.children_adoption(group_id, request.child_ids)

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to adopt children",
        )


@router.get(
    "/{group_id}/members",
    response_model=list[PersonResponse],
    summary="List subtree members",
    description="Every person directly assigned to this group or any descendant.",
)
async def get_group_members(
    group_id: str,
    service: Annotated[SubtreeQueryService, Depends(get_subtree_query_service)],
) -> list[PersonResponse]:
    try:
        members = await service.get_group_members(group_id)
        return [PersonResponse.from_domain(person) for person in members]

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list group members",
        )


@router.get(
    "/{group_id}/subtree",
    response_model=list[GroupResponse],
    summary="Get subtree",
    description="The group followed by all of its descendants, breadth-first.",
)
async def get_subtree(
    group_id: str,
    service: Annotated[SubtreeQueryService, Depends(get_subtree_query_service)],
) -> list[GroupResponse]:
    try:
        groups = await service.get_subtree(group_id)
        return [GroupResponse.from_domain(group) for group in groups]

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve subtree",
        )
