"""Translation of organization errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from org.ports.exceptions import (
    ConflictError,
    CycleError,
    InvariantError,
    NotFoundError,
    OrgError,
    ValidationError,
)

_STATUS_BY_KIND: dict[str, int] = {
    ValidationError.kind: status.HTTP_400_BAD_REQUEST,
    ConflictError.kind: status.HTTP_409_CONFLICT,
    NotFoundError.kind: status.HTTP_404_NOT_FOUND,
    CycleError.kind: status.HTTP_409_CONFLICT,
    InvariantError.kind: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def to_http_exception(error: OrgError) -> HTTPException:
    """Map an organization error to the matching HTTP status.

    The response detail is the error's structured form (kind, message and
    the offending field or entity id).
    """
    return HTTPException(
        status_code=_STATUS_BY_KIND.get(
            error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
        detail=error.as_dict(),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies and parameters as 400 validation errors."""
    first = exc.errors()[0] if exc.errors() else {}
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location) or None
    error = ValidationError(
        f"{field}: {first.get('msg', 'invalid request')}" if field else "Invalid request",
        field=field,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": error.as_dict()},
    )
