"""HTTP routes for persons and group assignment."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from org.application.services import PersonService
from org.dependencies.person import get_person_service
from org.ports.exceptions import NotFoundError, OrgError
from org.presentation.errors import to_http_exception
from org.presentation.groups.models import RemovalResponse
from org.presentation.persons.models import (
    CreateUserRequest,
    DischargeResponse,
    PersonResponse,
    UpdateUserRequest,
)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Person created"},
        400: {"description": "Malformed id, blank name or unknown field"},
        409: {"description": "A person with this id already exists"},
        500: {"description": "Internal server error"},
    },
)
async def create_user(
    request: CreateUserRequest,
    service: Annotated[PersonService, Depends(get_person_service)],
) -> PersonResponse:
    """Create a new, unassigned person."""
    try:
        person = await service.create_user(request.to_fields())
        return PersonResponse.from_domain(person)

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user",
        )


@router.get(
    "",
    response_model=list[PersonResponse],
    summary="List users",
    description="Persons that have not been discharged, in creation order.",
)
async def get_users(
    service: Annotated[PersonService, Depends(get_person_service)],
) -> list[PersonResponse]:
    try:
        persons = await service.get_users()
        return [PersonResponse.from_domain(p) for p in persons]

    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list users",
        )


@router.get(
    "/updated",
    response_model=list[PersonResponse],
    summary="List users updated in a window",
    description="Persons whose last change lies strictly between `from` and `to`.",
    responses={400: {"description": "Missing, malformed or reversed bounds"}},
)
async def get_updated_from(
    start: Annotated[datetime, Query(alias="from")],
    end: Annotated[datetime, Query(alias="to")],
    service: Annotated[PersonService, Depends(get_person_service)],
) -> list[PersonResponse]:
    try:
        persons = await service.get_updated_from(start, end)
        return [PersonResponse.from_domain(p) for p in persons]

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list updated users",
        )


@router.get("/{person_id}")
async def get_user(
    person_id: str,
    service: Annotated[PersonService, Depends(get_person_service)],
) -> PersonResponse:
    """Get a person by id, discharged persons included.

    Raises:
        HTTPException: 404 if the person does not exist
        HTTPException: 500 for unexpected errors
    """
    try:
        person = await service.get_user(person_id)
        if person is None:
            raise to_http_exception(NotFoundError("Person", person_id))
        return PersonResponse.from_domain(person)

    except HTTPException:
        raise
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve user",
        )


@router.patch(
    "/{person_id}",
    response_model=PersonResponse,
    responses={
        400: {"description": "Invalid or non-patchable field"},
        404: {"description": "Person not found"},
    },
)
async def update_user(
    person_id: str,
    request: UpdateUserRequest,
    service: Annotated[PersonService, Depends(get_person_service)],
) -> PersonResponse:
    """Patch a person's profile; omitted or null fields are left unchanged."""
    try:
        person = await service.update_user({"id": person_id, **request.to_fields()})
        return PersonResponse.from_domain(person)

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user",
        )


@router.delete("/{person_id}")
async def remove_user(
    person_id: str,
    service: Annotated[PersonService, Depends(get_person_service)],
) -> RemovalResponse:
    """Hard-delete a person; an unknown id reports zero counts."""
    try:
        result = await service.remove_user(person_id)
        return RemovalResponse(matched=result.matched, deleted=result.deleted)

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove user",
        )


@router.post("/{person_id}/discharge")
async def discharge(
    person_id: str,
    service: Annotated[PersonService, Depends(get_person_service)],
) -> DischargeResponse:
    """Discharge a person and strip them from every group."""
    try:
        result = await service.discharge(person_id)
        return DischargeResponse(matched=result.matched)

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to discharge user",
        )


@router.put(
    "/{person_id}/assign/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Person, group not found or person discharged"}},
)
async def assign(
    person_id: str,
    group_id: str,
    service: Annotated[PersonService, Depends(get_person_service)],
) -> None:
    """Assign (or transfer) a person to a group."""
    try:
        await service.assign(person_id, group_id)

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to assign user",
        )


@router.put(
    "/{person_id}/manage/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Person or group not found"},
        422: {"description": "Group is not the person's direct group"},
    },
)
async def manage(
    person_id: str,
    group_id: str,
    service: Annotated[PersonService, Depends(get_person_service)],
) -> None:
    """Make a person admin of their direct group."""
    try:
        await service.manage(person_id, group_id)

    except OrgError as e:
        raise to_http_exception(e) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to promote user",
        )
